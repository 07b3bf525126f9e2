"""
Gateway definition and settings-field descriptors published to the host checkout.
"""

from dataclasses import asdict, dataclass
from typing import List, Optional

from django.conf import settings


@dataclass(frozen=True)
class GatewayDefinition:
    gateway_id: str
    admin_label: str
    checkout_label: str
    test_mode: bool = False


@dataclass(frozen=True)
class SettingsField:
    id: str
    name: str
    desc: str
    type: str
    size: Optional[str] = None
    required: bool = False
    sensitive: bool = False


def _gateway_config() -> dict:
    return getattr(settings, "PAYMENT_GATEWAY", {})


def get_gateway_definition(test_mode: bool = False) -> GatewayDefinition:
    config = _gateway_config()
    return GatewayDefinition(
        gateway_id=config.get("GATEWAY_ID", "custom_gateway"),
        admin_label=config.get("ADMIN_LABEL", "Custom Gateway"),
        checkout_label=config.get("CHECKOUT_LABEL", "Pay with Custom Gateway"),
        test_mode=test_mode,
    )


def get_settings_fields() -> List[SettingsField]:
    gateway_id = _gateway_config().get("GATEWAY_ID", "custom_gateway")
    return [
        SettingsField(
            id=f"{gateway_id}_settings",
            name="Custom Gateway Settings",
            desc="Configure your custom payment gateway settings",
            type="header",
        ),
        SettingsField(
            id=f"{gateway_id}_api_key",
            name="API Key",
            desc="Enter the API key for your custom gateway",
            type="text",
            size="regular",
            required=True,
        ),
        SettingsField(
            id=f"{gateway_id}_secret",
            name="Secret Key",
            desc="Enter the secret key for your custom gateway",
            type="password",
            size="regular",
            required=True,
            sensitive=True,
        ),
        SettingsField(
            id=f"{gateway_id}_test_mode",
            name="Test Mode",
            desc="Send charges to the processor's test environment",
            type="checkbox",
        ),
    ]


def describe_gateway(test_mode: bool = False) -> dict:
    return {
        **asdict(get_gateway_definition(test_mode=test_mode)),
        "settings_fields": [asdict(field) for field in get_settings_fields()],
    }
