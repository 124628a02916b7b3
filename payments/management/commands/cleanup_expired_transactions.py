"""
Management command to delete stale pending payment intents.

Usage:
    python manage.py cleanup_expired_transactions
    python manage.py cleanup_expired_transactions --max-age-hours 48

Meant to run from cron or any periodic scheduler.
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from payments.services.ledger import LedgerService


class Command(BaseCommand):
    help = 'Delete pending top-up and job payment intents older than the given age'

    def add_arguments(self, parser):
        parser.add_argument(
            '--max-age-hours',
            type=int,
            default=settings.PENDING_TRANSACTION_MAX_AGE_HOURS,
            help='Age in hours after which a pending intent is removed'
        )

    def handle(self, *args, **options):
        result = LedgerService().cleanup_expired_transactions(options['max_age_hours'])
        self.stdout.write(self.style.SUCCESS(
            f"✓ Removed {result['transactions']} top-up and "
            f"{result['paid_transactions']} job payment intents"
        ))
