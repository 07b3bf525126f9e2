from django.db import models


class GatewaySettings(models.Model):
    """
    Gateway configuration managed through Django admin.

    Single-row table (pk=1). Read fresh by DatabaseSettingsStore on every
    processing cycle so credential rotations take effect immediately.
    """

    SINGLETON_PK = 1

    api_key = models.CharField(max_length=255, blank=True, help_text="Enter the API key for your custom gateway")
    secret = models.CharField(max_length=255, blank=True, help_text="Enter the secret key for your custom gateway")
    test_mode = models.BooleanField(default=False, help_text="Send charges to the processor's test environment")
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def __str__(self):
        return "Gateway settings" + (" (test mode)" if self.test_mode else "")

    class Meta:
        db_table = "gateway_settings"
        verbose_name = "Gateway Settings"
        verbose_name_plural = "Gateway Settings"
