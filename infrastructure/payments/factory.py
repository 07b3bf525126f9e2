"""
Payment Processor Factory
==========================

Factory pattern for creating payment processor instances based on configuration.
"""

import logging
from typing import Literal, Optional

from django.conf import settings

from .interface import PaymentProcessorInterface
from .mock_provider import MockProcessor
from .stripe_provider import StripeProcessor

logger = logging.getLogger(__name__)

PaymentBackend = Literal["stripe", "mock"]


class PaymentProcessorFactory:
    """
    Factory for creating payment processor instances.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"PAYMENT_PROCESSOR": "stripe"}

        # In your code
        processor = PaymentProcessorFactory.create()
    """

    @staticmethod
    def create(backend: Optional[PaymentBackend] = None) -> PaymentProcessorInterface:
        """
        Create a payment processor instance.

        Args:
            backend: Processor type ('stripe' or 'mock').
                    If None, reads INFRASTRUCTURE['PAYMENT_PROCESSOR']

        Raises:
            ValueError: If backend type is invalid
        """
        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("PAYMENT_PROCESSOR", "stripe")

        logger.info(f"Creating payment processor: {backend_type}")

        if backend_type == "stripe":
            return StripeProcessor()
        if backend_type == "mock":
            return MockProcessor()
        raise ValueError(f"Invalid payment processor: {backend_type}. Supported: 'stripe', 'mock'")
