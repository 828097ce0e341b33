from django.core.management.base import BaseCommand
from django.utils import timezone
from datetime import timedelta
from rides.models import RideRequest
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Clean up old declined and cancelled ride requests."

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=30,
            help="Delete requests older than this many days (default: 30).",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be deleted without actually deleting.",
        )

    def handle(self, *args, **options):
        days = options["days"]
        dry_run = options["dry_run"]
        cutoff = timezone.now() - timedelta(days=days)

        # Completed rides are the payment record and are kept
        old_rides = RideRequest.objects.filter(
            requested_at__lt=cutoff,
            status__in=['declined', 'cancelled'],
        )
        rides_count = old_rides.count()

        if dry_run:
            self.stdout.write(
                self.style.WARNING(
                    f"DRY RUN: Would delete {rides_count} ride requests older than {days} days."
                )
            )
        else:
            old_rides.delete()
            logger.info("Cleaned up %s old ride requests", rides_count)
            self.stdout.write(
                self.style.SUCCESS(
                    f"Deleted {rides_count} ride requests older than {days} days."
                )
            )
