# products/management/commands/seed_catalog.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Category, Product


CATEGORIES = [
    ("Jackets", "Timeless leather jackets for every season"),
    ("Bags", "Handcrafted leather bags and briefcases"),
    ("Shoes", "Full-grain leather footwear"),
    ("Accessories", "Belts, wallets and small leather goods"),
]

PRODUCTS = [
    # (sku, name, category, price, inventory, featured)
    ("LJ-CLASSIC", "Classic Leather Jacket", "Jackets", "299.99", 15, True),
    ("LJ-BIKER", "Biker Leather Jacket", "Jackets", "349.99", 8, False),
    ("LB-MESSENGER", "Leather Messenger Bag", "Bags", "179.99", 20, True),
    ("LB-TOTE", "Leather Tote Bag", "Bags", "149.99", 12, False),
    ("LS-OXFORD", "Oxford Leather Shoes", "Shoes", "189.99", 10, True),
    ("LA-BELT", "Leather Belt", "Accessories", "49.99", 40, False),
    ("LA-WALLET", "Bifold Leather Wallet", "Accessories", "59.99", 30, False),
]


class Command(BaseCommand):
    help = "Seed storefront categories and sample leather products (idempotent)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding catalog..."))

        # -------------------------------
        # CATEGORIES
        # -------------------------------
        category_objs = {}
        for position, (name, description) in enumerate(CATEGORIES):
            obj, _ = Category.objects.get_or_create(
                name=name,
                defaults={"description": description, "sort_order": position},
            )
            category_objs[name] = obj

        # -------------------------------
        # PRODUCTS
        # -------------------------------
        created_count = 0
        for sku, name, cat, price, qty, featured in PRODUCTS:
            _, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "category": category_objs[cat],
                    "price": Decimal(price),
                    "inventory_quantity": qty,
                    "is_featured": featured,
                    "materials": "Full-grain leather",
                },
            )
            if created:
                created_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Catalog seeded: {len(category_objs)} categories, {created_count} new products."
            )
        )
