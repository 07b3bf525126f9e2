from django.test import TestCase, override_settings

from payment_gateway.domain.services.settings_store import (
    DatabaseSettingsStore,
    DjangoSettingsStore,
    create_settings_store,
)
from payment_gateway.models import GatewaySettings
from payment_gateway.tests.factories import GatewaySettingsFactory


class DatabaseSettingsStoreTest(TestCase):
    def setUp(self):
        self.store = DatabaseSettingsStore()

    def test_unconfigured_returns_incomplete_credentials(self):
        credentials = self.store.get_credentials()

        self.assertFalse(credentials.is_complete())
        self.assertFalse(credentials.test_mode)

    def test_reads_admin_managed_row(self):
        GatewaySettingsFactory(api_key="pk_live_1", secret="sk_live_1", test_mode=False)

        credentials = self.store.get_credentials()

        self.assertEqual(credentials.api_key, "pk_live_1")
        self.assertEqual(credentials.secret, "sk_live_1")
        self.assertTrue(credentials.is_complete())

    def test_rotation_visible_on_next_read(self):
        row = GatewaySettingsFactory(secret="sk_old")
        self.assertEqual(self.store.get_credentials().secret, "sk_old")

        row.secret = "sk_rotated"
        row.save()

        self.assertEqual(self.store.get_credentials().secret, "sk_rotated")

    def test_settings_row_is_a_singleton(self):
        GatewaySettings(api_key="a", secret="b").save()
        GatewaySettings(api_key="c", secret="d").save()

        self.assertEqual(GatewaySettings.objects.count(), 1)
        self.assertEqual(self.store.get_credentials().api_key, "c")

    def test_repr_hides_secrets(self):
        GatewaySettingsFactory(api_key="pk_visible_nowhere", secret="sk_visible_nowhere")

        text = repr(self.store.get_credentials())

        self.assertNotIn("pk_visible_nowhere", text)
        self.assertNotIn("sk_visible_nowhere", text)


class DjangoSettingsStoreTest(TestCase):
    def test_reads_settings_on_every_call(self):
        store = DjangoSettingsStore()
        with override_settings(PAYMENT_GATEWAY={"CREDENTIALS": {"api_key": "k1", "secret": "s1"}}):
            self.assertEqual(store.get_credentials().secret, "s1")
        with override_settings(PAYMENT_GATEWAY={"CREDENTIALS": {"api_key": "k2", "secret": "s2", "test_mode": True}}):
            credentials = store.get_credentials()
            self.assertEqual(credentials.secret, "s2")
            self.assertTrue(credentials.test_mode)

    @override_settings(PAYMENT_GATEWAY={})
    def test_missing_configuration_is_incomplete(self):
        self.assertEqual(DjangoSettingsStore().get_credentials().missing_fields(), ["api_key", "secret"])


class CreateSettingsStoreTest(TestCase):
    def test_backends(self):
        self.assertIsInstance(create_settings_store("database"), DatabaseSettingsStore)
        self.assertIsInstance(create_settings_store("django"), DjangoSettingsStore)

    @override_settings(INFRASTRUCTURE={"GATEWAY_SETTINGS_BACKEND": "database"})
    def test_reads_backend_from_settings(self):
        self.assertIsInstance(create_settings_store(), DatabaseSettingsStore)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            create_settings_store("vault")
