from django.core.management.base import BaseCommand
from django.utils import timezone

from donations.models import QueuedConfirmation
from donations.services import forward_queued
from templeapi import TempleApiClient, TempleApiError


class Command(BaseCommand):
    help = "Send payment confirmations queued while the backend was unreachable"

    def add_arguments(self, parser):
        parser.add_argument("--max", type=int, default=100, help="Max confirmations to process")
        parser.add_argument("--minutes", type=int, default=0, help="Only confirmations queued within last N minutes (0=all)")

    def handle(self, *args, **opts):
        qs = QueuedConfirmation.objects.filter(status="QUEUED").order_by("created_at", "id")
        if opts["minutes"] > 0:
            cutoff = timezone.now() - timezone.timedelta(minutes=opts["minutes"])
            qs = qs.filter(created_at__gte=cutoff)

        client = TempleApiClient()
        cnt = 0
        sent = 0
        for q in qs[: opts["max"]]:
            cnt += 1
            try:
                if forward_queued(client, q):
                    sent += 1
                    self.stdout.write(self.style.SUCCESS(f"Confirmation {q.utr} -> SENT"))
                else:
                    self.stdout.write(self.style.WARNING(f"{q.utr}: rejected by backend: {q.last_error}"))
            except TempleApiError as e:
                self.stdout.write(self.style.ERROR(f"{q.utr}: backend still unavailable ({e}); stopping"))
                break

        self.stdout.write(self.style.SUCCESS(f"Checked {cnt}, sent {sent} confirmations."))
