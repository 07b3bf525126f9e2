from .gateway_adapter import GatewayAdapter, LookupOutcome, LookupResult, idempotency_key_for
from .intake_service import OrderIntakeService
from .order_ledger import OrderDraft, OrderLedger, TransactionRecordData
from .order_processor import CheckoutOutcome, OrderProcessor, ReconciliationReport, RedirectTargets
from .settings_store import DatabaseSettingsStore, DjangoSettingsStore, SettingsStore, create_settings_store
from .token_service import AntiReplayTokenService


__all__ = [
    "AntiReplayTokenService",
    "CheckoutOutcome",
    "DatabaseSettingsStore",
    "DjangoSettingsStore",
    "GatewayAdapter",
    "LookupOutcome",
    "LookupResult",
    "OrderDraft",
    "OrderIntakeService",
    "OrderLedger",
    "OrderProcessor",
    "ReconciliationReport",
    "RedirectTargets",
    "SettingsStore",
    "TransactionRecordData",
    "create_settings_store",
    "idempotency_key_for",
]
