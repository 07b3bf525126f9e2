"""
Shared service-layer utilities.

Services receive their collaborators through ``__init__`` and raise the
exceptions from ``payment_gateway.domain.exceptions`` for expected failures.
``BaseService`` gives every service a class-named logger and a timing
decorator.
"""

import logging
import time
from functools import wraps
from typing import Callable


class BaseService:
    """
    Base class for services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class OrderLedger(BaseService):
            def __init__(self):
                super().__init__()

            @BaseService.log_performance
            def mark_complete(self, order_id, record):
                self.logger.info(f"Completing order {order_id}")
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time; exceptions are logged with their type and re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms
                self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")
                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.warning(
                    f"{method_name} raised {type(e).__name__} after {elapsed_time:.2f}ms: {str(e)}",
                )
                raise

        return wrapper
