from django.conf import settings
from django.core.management.base import BaseCommand

from cart.cart import purge_stale


class Command(BaseCommand):
    help = "Delete cart sessions that have not been touched for a number of days"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days", type=int, default=None,
            help=f"Age threshold in days (default: CART_STALE_DAYS={getattr(settings, 'CART_STALE_DAYS', 30)})",
        )

    def handle(self, *args, **options):
        removed = purge_stale(options["days"])
        self.stdout.write(self.style.SUCCESS(f"Removed stale carts: {removed}"))
