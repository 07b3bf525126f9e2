from .gateway_settings import GatewaySettings
from .order import Order
from .replay_token import ConsumedReplayToken
from .transaction_record import TransactionRecord


__all__ = [
    "Order",
    "TransactionRecord",
    "GatewaySettings",
    "ConsumedReplayToken",
]
