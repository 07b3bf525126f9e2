from prometheus_client import Counter


# Orders by terminal (or reconciliation-pending) outcome
checkout_orders_total = Counter("checkout_orders_total", "Checkout orders by outcome", ["status"])

checkout_rejections_total = Counter("checkout_rejections_total", "Submissions rejected at intake", ["code"])

# One increment per processor request, including retries
gateway_charge_attempts_total = Counter(
    "gateway_charge_attempts_total", "Charge requests sent to the payment processor", ["result"]
)

reconciliation_outcomes_total = Counter(
    "reconciliation_outcomes_total", "Pending orders examined by reconciliation", ["outcome"]
)
