# payments/management/commands/expire_payments.py

from django.core.management.base import BaseCommand

from payments.services import expire_stale_requests


class Command(BaseCommand):
    help = "Expire pending M-Pesa payment requests older than MPESA['PAYMENT_TIMEOUT_SECONDS']"

    def handle(self, *args, **options):
        count = expire_stale_requests()
        self.stdout.write(self.style.SUCCESS(f"Expired {count} payment request(s)."))
