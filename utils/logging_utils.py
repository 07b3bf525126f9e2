from typing import Any, Dict, Mapping


def mask_value(value: Any) -> Any:
    """Mask an email or opaque token so it can appear in log lines."""
    if not isinstance(value, str):
        return value
    if '@' in value:  # email
        name, _, domain = value.partition('@')
        return (name[:2] + '***@' + domain) if name else '***@' + domain
    if len(value) > 12:
        return value[:4] + '...' + value[-4:]
    return '***'


def summarize_submission(submission: Mapping[str, Any]) -> Dict[str, Any]:
    """Loggable view of a checkout submission: masked identity, sizes instead of contents."""
    cart = submission.get("cart")
    return {
        "amount": submission.get("amount"),
        "currency": submission.get("currency"),
        "email": mask_value(submission.get("email")),
        "cart_items": len(cart) if isinstance(cart, (list, tuple)) else None,
        "has_token": bool(submission.get("anti_replay_token")),
    }
