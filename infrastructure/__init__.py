"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - payments: Payment processor abstraction (Stripe, mock)
    - container: Composition root wiring the gateway services

This package enables:
    - Easy testing with mock implementations
    - Switching between processors without code changes
"""
