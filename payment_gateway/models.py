from .domain.models.gateway_settings import GatewaySettings
from .domain.models.order import Order
from .domain.models.replay_token import ConsumedReplayToken
from .domain.models.transaction_record import TransactionRecord


__all__ = [
    "Order",
    "TransactionRecord",
    "GatewaySettings",
    "ConsumedReplayToken",
]
