from django.core.management.base import BaseCommand
from accounts.models import University
import logging

logger = logging.getLogger(__name__)


UNIVERSITIES = [
    {"name": "American University of Beirut (AUB)", "city": "Beirut", "latitude": 33.9, "longitude": 35.48},
    {"name": "Lebanese American University (LAU)", "city": "Beirut", "latitude": 33.89, "longitude": 35.47},
    {"name": "Notre Dame University (NDU)", "city": "Zouk Mosbeh", "latitude": 33.98, "longitude": 35.62},
    {"name": "Université Saint-Joseph (USJ)", "city": "Beirut", "latitude": 33.88, "longitude": 35.5},
    {"name": "Lebanese University (LU)", "city": "Beirut", "latitude": 33.87, "longitude": 35.51},
    {"name": "University of Balamand", "city": "Koura", "latitude": 34.37, "longitude": 35.76},
    {"name": "Beirut Arab University (BAU)", "city": "Beirut", "latitude": 33.88, "longitude": 35.49},
    {"name": "Holy Spirit University of Kaslik (USEK)", "city": "Jounieh", "latitude": 33.98, "longitude": 35.65},
]


class Command(BaseCommand):
    help = "Seed the universities table with the supported Lebanese campuses."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be created without writing anything.",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]

        existing = set(University.objects.values_list("name", flat=True))
        missing = [u for u in UNIVERSITIES if u["name"] not in existing]

        if dry_run:
            self.stdout.write(
                self.style.WARNING(
                    f"DRY RUN: Would create {len(missing)} universities ({len(existing)} already present)."
                )
            )
            for uni in missing:
                self.stdout.write(f"- {uni['name']} ({uni['city']})")
            return

        for uni in missing:
            University.objects.create(**uni)
            self.stdout.write(f"- {uni['name']} ({uni['city']})")

        logger.info("Seeded %d universities", len(missing))
        self.stdout.write(
            self.style.SUCCESS(
                f"Created {len(missing)} universities, {len(existing)} already present."
            )
        )
