import hashlib
import logging
import secrets
from datetime import timedelta

from django.core import signing
from django.db import IntegrityError, transaction
from django.utils import timezone

from payment_gateway.domain.exceptions import SecurityError
from payment_gateway.domain.models import ConsumedReplayToken


logger = logging.getLogger(__name__)

TOKEN_SALT = "payment_gateway.checkout"


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AntiReplayTokenService:
    """
    Issues and spends single-use checkout tokens.

    A token is a random nonce signed with ``TimestampSigner``. It is authentic
    while the signature verifies and it is younger than ``max_age`` seconds; it
    can be consumed exactly once.
    """

    def __init__(self, max_age: int = 3600):
        self.max_age = max_age
        self.signer = signing.TimestampSigner(salt=TOKEN_SALT)

    def issue(self) -> str:
        return self.signer.sign(secrets.token_urlsafe(24))

    def verify(self, token) -> None:
        if not token or not isinstance(token, str):
            raise SecurityError("Missing anti-replay token", field="anti_replay_token")
        try:
            self.signer.unsign(token, max_age=self.max_age)
        except signing.SignatureExpired:
            raise SecurityError("Anti-replay token has expired", field="anti_replay_token")
        except signing.BadSignature:
            raise SecurityError("Invalid anti-replay token", field="anti_replay_token")
        if ConsumedReplayToken.objects.filter(digest=_digest(token)).exists():
            raise SecurityError("Anti-replay token has already been used", field="anti_replay_token")

    def consume(self, token: str) -> None:
        """Spend the token. Must be called inside the transaction that persists the submission."""
        self.verify(token)
        try:
            with transaction.atomic():
                ConsumedReplayToken.objects.create(digest=_digest(token))
        except IntegrityError:
            logger.warning("Concurrent reuse of an anti-replay token rejected")
            raise SecurityError("Anti-replay token has already been used", field="anti_replay_token")

    def purge_expired(self) -> int:
        """Delete digests old enough that the signature check alone rejects their tokens."""
        cutoff = timezone.now() - timedelta(seconds=self.max_age)
        deleted, _ = ConsumedReplayToken.objects.filter(consumed_at__lt=cutoff).delete()
        return deleted
