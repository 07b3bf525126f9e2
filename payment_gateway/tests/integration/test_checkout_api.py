"""
Integration tests for the checkout HTTP endpoints
"""

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import ServiceContainer
from infrastructure.payments import MockProcessor, ProcessorResponse, ProcessorUnavailableError
from payment_gateway.api import dependencies
from payment_gateway.models import Order
from payment_gateway.tests.factories import OrderFactory, TransactionRecordFactory, checkout_submission


class CheckoutAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.processor = MockProcessor()
        self.container = ServiceContainer(processor_backend=self.processor)
        patcher = patch.object(dependencies, "_container", self.container)
        patcher.start()
        self.addCleanup(patcher.stop)

    def issue_token(self):
        response = self.client.post(reverse("payment_gateway:checkout-token"))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data["anti_replay_token"]

    def submit(self, **overrides):
        payload = checkout_submission(self.issue_token(), **overrides)
        return self.client.post(reverse("payment_gateway:checkout"), payload, format="json")


class CheckoutTokenEndpointTest(CheckoutAPITestCase):
    def test_issues_distinct_tokens(self):
        first = self.client.post(reverse("payment_gateway:checkout-token"))
        second = self.client.post(reverse("payment_gateway:checkout-token"))

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data["expires_in"], 3600)
        self.assertNotEqual(first.data["anti_replay_token"], second.data["anti_replay_token"])


class CheckoutEndpointTest(CheckoutAPITestCase):
    def test_approved_checkout(self):
        self.processor.script(ProcessorResponse(success=True, transaction_id="TRANS_123", status="succeeded"))

        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], Order.STATUS_COMPLETE)
        self.assertEqual(response.data["transaction_id"], "TRANS_123")
        self.assertIn("purchase_key=", response.data["redirect_url"])

    def test_declined_checkout(self):
        self.processor.script(ProcessorResponse(success=False, status="card_declined", reason="insufficient_funds"))

        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertEqual(response.data["status"], Order.STATUS_FAILED)
        self.assertEqual(response.data["reason"], "insufficient_funds")
        self.assertEqual(response.data["redirect_url"], "/checkout/")

    def test_unresolved_checkout_is_accepted_as_pending(self):
        self.processor.script(ProcessorUnavailableError("timeout"), ProcessorUnavailableError("timeout"))
        self.processor.fail_lookups()

        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(response.data["status"], Order.STATUS_PENDING)

    def test_invalid_amount(self):
        response = self.submit(amount="abc")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "validation_error")
        self.assertEqual(response.data["error"]["field"], "amount")
        self.assertEqual(Order.objects.count(), 0)

    def test_missing_field_is_a_validation_error(self):
        payload = checkout_submission(self.issue_token())
        del payload["email"]

        response = self.client.post(reverse("payment_gateway:checkout"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["field"], "email")

    def test_missing_token_is_forbidden(self):
        payload = checkout_submission("")

        response = self.client.post(reverse("payment_gateway:checkout"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], "security_error")
        self.assertEqual(Order.objects.count(), 0)

    def test_replayed_token_is_forbidden(self):
        payload = checkout_submission(self.issue_token())
        self.client.post(reverse("payment_gateway:checkout"), payload, format="json")

        response = self.client.post(reverse("payment_gateway:checkout"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Order.objects.count(), 1)

    @override_settings(PAYMENT_GATEWAY={"CREDENTIALS": {"api_key": "pk_test_mock_key", "secret": ""}})
    def test_unconfigured_gateway_is_unavailable(self):
        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["error"]["code"], "configuration_error")
        self.assertEqual(Order.objects.get().status, Order.STATUS_PENDING)
        self.assertEqual(self.processor.requests, [])


class OrderDetailEndpointTest(CheckoutAPITestCase):
    def setUp(self):
        super().setUp()
        self.record = TransactionRecordFactory(transaction_id="TRANS_123")
        self.url = reverse("payment_gateway:order-detail", args=[self.record.order_id])

    def test_anonymous_access_is_refused(self):
        response = self.client.get(self.url)

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_staff_can_read_order(self):
        staff = get_user_model().objects.create_user(username="ops", password="pw", is_staff=True)
        self.client.force_authenticate(user=staff)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], Order.STATUS_COMPLETE)
        self.assertEqual(response.data["transaction_record"]["transaction_id"], "TRANS_123")
        self.assertNotIn("purchaser_info", response.data)

    def test_unknown_order(self):
        staff = get_user_model().objects.create_user(username="ops", password="pw", is_staff=True)
        self.client.force_authenticate(user=staff)

        response = self.client.get(reverse("payment_gateway:order-detail", args=[OrderFactory.build().id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "order_not_found")


class GatewayDefinitionEndpointTest(CheckoutAPITestCase):
    def test_describes_gateway(self):
        response = self.client.get(reverse("payment_gateway:gateway-definition"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["gateway_id"], "custom_gateway")
        self.assertEqual(response.data["checkout_label"], "Pay with Custom Gateway")
        self.assertTrue(response.data["test_mode"])
        self.assertEqual(len(response.data["settings_fields"]), 4)


class MetricsEndpointTest(CheckoutAPITestCase):
    def test_exposes_checkout_counters(self):
        self.submit()

        response = self.client.get(reverse("payment_gateway:gateway-metrics"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(b"checkout_orders_total", response.content)
        self.assertIn(b"gateway_charge_attempts_total", response.content)
