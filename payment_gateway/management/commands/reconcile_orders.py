from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from infrastructure.container import ServiceContainer
from payment_gateway.domain.exceptions import ConfigurationError


class Command(BaseCommand):
    help = "Reconciles orders left pending after a payment processor timeout."

    def add_arguments(self, parser):
        parser.add_argument(
            "--minutes",
            type=int,
            default=None,
            help="Only reconcile orders pending for longer than this many minutes "
            "(default: PAYMENT_GATEWAY['RECONCILE_AFTER_MINUTES'])",
        )

    def handle(self, *args, **options):
        minutes = options["minutes"]
        if minutes is None:
            minutes = settings.PAYMENT_GATEWAY.get("RECONCILE_AFTER_MINUTES", 15)
        if minutes < 0:
            raise CommandError("--minutes must not be negative")

        self.stdout.write(f"Reconciling orders pending for more than {minutes} minutes...")

        try:
            report = ServiceContainer().order_processor().reconcile_pending(older_than=timedelta(minutes=minutes))
        except ConfigurationError as e:
            raise CommandError(f"Gateway is not configured: {e}") from e

        self.stdout.write(f"Examined {report.examined} pending orders.")
        for order_id in report.order_ids:
            self.stdout.write(f"  {order_id}")
        self.stdout.write(
            self.style.SUCCESS(
                f"Reconciliation complete: {report.completed} complete, {report.failed} failed, "
                f"{report.still_pending} still pending."
            )
        )
        if report.still_pending:
            self.stdout.write(self.style.WARNING("Some orders could not be resolved; they remain pending."))
