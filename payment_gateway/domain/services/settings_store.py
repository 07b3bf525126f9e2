"""
Settings Store
==============

Read-only access to gateway credentials. Every call reads the backing store
again; nothing is cached between calls, so a credential rotation made through
the admin interface is visible to the very next checkout.
"""

import logging
from abc import ABC, abstractmethod
from typing import Literal, Optional

from django.conf import settings

from infrastructure.payments.interface import GatewayCredentials
from payment_gateway.domain.models import GatewaySettings


logger = logging.getLogger(__name__)

SettingsBackend = Literal["database", "django"]


class SettingsStore(ABC):
    @abstractmethod
    def get_credentials(self) -> GatewayCredentials:
        """Return the latest committed gateway credentials."""
        pass


class DatabaseSettingsStore(SettingsStore):
    """Credentials from the admin-managed ``GatewaySettings`` row."""

    def get_credentials(self) -> GatewayCredentials:
        row = GatewaySettings.objects.filter(pk=GatewaySettings.SINGLETON_PK).first()
        if row is None:
            logger.warning("Gateway settings have not been configured")
            return GatewayCredentials()
        return GatewayCredentials(api_key=row.api_key, secret=row.secret, test_mode=row.test_mode)


class DjangoSettingsStore(SettingsStore):
    """Credentials from ``settings.PAYMENT_GATEWAY['CREDENTIALS']`` (environment driven)."""

    def get_credentials(self) -> GatewayCredentials:
        config = getattr(settings, "PAYMENT_GATEWAY", {}).get("CREDENTIALS") or {}
        return GatewayCredentials(
            api_key=config.get("api_key") or "",
            secret=config.get("secret") or "",
            test_mode=bool(config.get("test_mode", False)),
        )


def create_settings_store(backend: Optional[SettingsBackend] = None) -> SettingsStore:
    backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("GATEWAY_SETTINGS_BACKEND", "database")

    if backend_type == "database":
        return DatabaseSettingsStore()
    if backend_type == "django":
        return DjangoSettingsStore()
    raise ValueError(f"Invalid gateway settings backend: {backend_type}. Supported: 'database', 'django'")
