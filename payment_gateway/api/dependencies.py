"""
Process-wide wiring for the HTTP adapter layer.

The views are the only place that reaches for a shared container; everything
below them receives its collaborators explicitly.
"""

from infrastructure.container import ServiceContainer


_container = ServiceContainer()


def get_container() -> ServiceContainer:
    return _container


def get_order_processor():
    return _container.order_processor()
