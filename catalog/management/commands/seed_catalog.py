from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import Headphone

PRODUCTS = [
    {
        "name": "Bone+ Headphone",
        "description": "Bone-conduction headphone with open-ear design and 8h battery.",
        "price": Decimal("199.99"),
        "image_url": "/images/product1.jpg",
        "stock_quantity": 50,
    },
    {
        "name": "Bone+ Headphone Pro",
        "description": "Titanium frame, IP67 sweat resistance and dual noise-cancelling mics.",
        "price": Decimal("249.99"),
        "image_url": "/images/product2.jpg",
        "stock_quantity": 25,
    },
]


class Command(BaseCommand):
    help = "Seed the headphone catalogue (safe to run repeatedly)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset-stock", action="store_true",
            help="Overwrite stock levels of existing products with the seed values",
        )

    def handle(self, *args, **options):
        created, updated = 0, 0
        with transaction.atomic():
            for row in PRODUCTS:
                defaults = dict(row)
                stock = defaults.pop("stock_quantity")
                product, was_created = Headphone.objects.get_or_create(
                    name=row["name"], defaults={**defaults, "stock_quantity": stock},
                )
                if was_created:
                    created += 1
                elif options["reset_stock"]:
                    product.stock_quantity = stock
                    product.save(update_fields=["stock_quantity", "updated_at"])
                    updated += 1

        self.stdout.write(self.style.SUCCESS(f"Created products: {created} | Restocked: {updated}"))
