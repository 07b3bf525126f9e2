"""
Payment Processor Abstraction Layer
====================================

Provides a unified interface for charging orders across payment processors.
"""

from .factory import PaymentProcessorFactory
from .interface import (
    ChargeRequest,
    GatewayCredentials,
    PaymentException,
    PaymentProcessorInterface,
    ProcessorAuthenticationError,
    ProcessorResponse,
    ProcessorUnavailableError,
)
from .mock_provider import MockProcessor
from .stripe_provider import StripeProcessor

__all__ = [
    "PaymentProcessorInterface",
    "ChargeRequest",
    "GatewayCredentials",
    "ProcessorResponse",
    "PaymentException",
    "ProcessorUnavailableError",
    "ProcessorAuthenticationError",
    "MockProcessor",
    "StripeProcessor",
    "PaymentProcessorFactory",
]
