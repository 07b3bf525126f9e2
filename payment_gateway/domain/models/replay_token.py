from django.db import models


class ConsumedReplayToken(models.Model):
    """Digest of an anti-replay token that has already been spent on a submission."""

    digest = models.CharField(max_length=64, unique=True)
    consumed_at = models.DateTimeField(auto_now_add=True, db_index=True)

    def __str__(self):
        return f"{self.digest[:12]}... @ {self.consumed_at}"

    class Meta:
        db_table = "gateway_consumed_tokens"
