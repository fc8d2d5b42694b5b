# products/tests/test_admin_catalog.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Category, Product

User = get_user_model()


class AdminCatalogTests(TestCase):
    """
    GUARANTEES:
    - Only admins can create / edit / delete catalog entries
    - Admin list includes unpublished products
    - Validation rejects non-positive prices and duplicate SKUs
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="staff@lethashop.com", password="secret12")
        self.customer = User.objects.create_user(email="jane@example.com", password="secret12")
        self.category = Category.objects.create(name="Bags")

    def test_customer_cannot_create_product(self):
        self.client.force_authenticate(self.customer)
        res = self.client.post(
            "/api/admin/products/", {"name": "Tote", "price": "149.99"}, format="json"
        )
        self.assertEqual(res.status_code, 403)

    def test_admin_creates_product(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/admin/products/",
            {
                "name": "Leather Tote Bag",
                "price": "149.99",
                "category": str(self.category.id),
                "inventory_quantity": 12,
                "sku": "lb-tote",
                "gallery_images": ["https://cdn.example.com/tote-1.jpg"],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["slug"], "leather-tote-bag")
        self.assertEqual(res.data["sku"], "LB-TOTE")
        self.assertEqual(res.data["category_slug"], "bags")

    def test_rejects_zero_price(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/admin/products/", {"name": "Freebie", "price": "0.00"}, format="json"
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("price", res.data)

    def test_rejects_duplicate_sku(self):
        Product.objects.create(name="Belt", sku="LA-BELT", price=Decimal("49.99"))
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/admin/products/",
            {"name": "Belt Two", "sku": "la-belt", "price": "39.99"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("sku", res.data)

    def test_admin_list_includes_unpublished(self):
        Product.objects.create(name="Draft", price=Decimal("10.00"), is_published=False)
        Product.objects.create(name="Live", price=Decimal("10.00"))
        self.client.force_authenticate(self.admin)

        res = self.client.get("/api/admin/products/")
        self.assertEqual(res.data["count"], 2)

        res = self.client.get("/api/admin/products/", {"is_published": "false"})
        self.assertEqual(res.data["count"], 1)

    def test_admin_updates_and_deletes_product(self):
        p = Product.objects.create(name="Wallet", price=Decimal("59.99"))
        self.client.force_authenticate(self.admin)

        res = self.client.patch(
            f"/api/admin/products/{p.id}/", {"price": "64.99"}, format="json"
        )
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["price"], "64.99")

        res = self.client.delete(f"/api/admin/products/{p.id}/")
        self.assertEqual(res.status_code, 204)
        self.assertFalse(Product.objects.filter(pk=p.id).exists())

    def test_admin_manages_categories(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/admin/categories/", {"name": "Small Leather Goods"}, format="json"
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["slug"], "small-leather-goods")

        res = self.client.patch(
            f"/api/admin/categories/{self.category.id}/",
            {"parent": str(self.category.id)},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_seed_catalog_command_is_idempotent(self):
        from django.core.management import call_command

        call_command("seed_catalog", verbosity=0)
        call_command("seed_catalog", verbosity=0)

        self.assertEqual(Product.objects.filter(sku="LJ-CLASSIC").count(), 1)
        self.assertTrue(Category.objects.filter(slug="accessories").exists())
