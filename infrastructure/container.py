"""
Composition Root
================

Builds the order-processing object graph from configuration. The core
services never look collaborators up themselves; everything is constructed
here and passed in.

Usage:
    from infrastructure.container import build_order_processor

    processor = build_order_processor()
    outcome = processor.checkout(submission)

    # Tests swap any collaborator
    processor = build_order_processor(processor_backend=MockProcessor())
"""

import logging
from typing import Optional

from django.conf import settings

from .payments import PaymentProcessorFactory, PaymentProcessorInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Wires the gateway services for one configuration.

    Each container owns its own instances; create a new container (or call
    ``reset``) to pick up configuration changes. Credentials are not part of
    the graph: the settings store is asked for them on every processing cycle.
    """

    def __init__(self, processor_backend: Optional[PaymentProcessorInterface] = None, settings_store=None):
        self._processor = processor_backend
        self._settings_store = settings_store
        self._ledger = None
        self._token_service = None
        logger.debug("Service container initialized")

    @property
    def gateway_config(self) -> dict:
        return getattr(settings, "PAYMENT_GATEWAY", {})

    def payment_processor(self) -> PaymentProcessorInterface:
        if self._processor is None:
            self._processor = PaymentProcessorFactory.create()
            logger.debug(f"Created payment processor: {type(self._processor).__name__}")
        return self._processor

    def settings_store(self):
        if self._settings_store is None:
            from payment_gateway.domain.services.settings_store import create_settings_store

            self._settings_store = create_settings_store()
            logger.debug(f"Created settings store: {type(self._settings_store).__name__}")
        return self._settings_store

    def ledger(self):
        if self._ledger is None:
            from payment_gateway.domain.services.order_ledger import OrderLedger

            self._ledger = OrderLedger()
        return self._ledger

    def token_service(self):
        if self._token_service is None:
            from payment_gateway.domain.services.token_service import AntiReplayTokenService

            self._token_service = AntiReplayTokenService(max_age=self.gateway_config.get("TOKEN_MAX_AGE_SECONDS", 3600))
        return self._token_service

    def gateway_adapter(self):
        from payment_gateway.domain.services.gateway_adapter import GatewayAdapter

        config = self.gateway_config
        return GatewayAdapter(
            processor=self.payment_processor(),
            max_retries=config.get("MAX_RETRIES", 1),
            backoff_seconds=config.get("RETRY_BACKOFF_SECONDS", 1.0),
            backoff_max_seconds=config.get("RETRY_BACKOFF_MAX_SECONDS", 8.0),
        )

    def intake_service(self):
        from payment_gateway.domain.services.intake_service import OrderIntakeService

        return OrderIntakeService(
            ledger=self.ledger(),
            token_service=self.token_service(),
            gateway_id=self.gateway_config.get("GATEWAY_ID", "custom_gateway"),
        )

    def order_processor(self):
        from payment_gateway.domain.services.order_processor import OrderProcessor, RedirectTargets

        config = self.gateway_config
        return OrderProcessor(
            intake_service=self.intake_service(),
            adapter=self.gateway_adapter(),
            ledger=self.ledger(),
            settings_store=self.settings_store(),
            redirects=RedirectTargets(
                success_url=config.get("SUCCESS_URL", "/checkout/success/"),
                checkout_url=config.get("CHECKOUT_URL", "/checkout/"),
                pending_url=config.get("PENDING_URL", "/checkout/pending/"),
            ),
        )

    def reset(self):
        """Drop cached instances so the next call rebuilds them from settings."""
        self._processor = None
        self._settings_store = None
        self._ledger = None
        self._token_service = None
        logger.info("Service container reset")


def build_order_processor(processor_backend: Optional[PaymentProcessorInterface] = None, settings_store=None):
    """Build a fully wired OrderProcessor."""
    return ServiceContainer(processor_backend=processor_backend, settings_store=settings_store).order_processor()
