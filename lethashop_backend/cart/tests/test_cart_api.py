# cart/tests/test_cart_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from cart.models import CartItem
from products.models import Product

User = get_user_model()


class CartApiTests(TestCase):
    """
    Cart API tests.

    GUARANTEES:
    - Cart requires authentication
    - Adding the same product twice increments the line (upsert)
    - Totals are computed from live product prices
    - Carts are private to their owner
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="amina@example.com", password="secret12")
        self.other = User.objects.create_user(email="otieno@example.com", password="secret12")
        self.client.force_authenticate(self.user)

        self.jacket = Product.objects.create(
            name="Classic Leather Jacket", price=Decimal("299.99"), inventory_quantity=5
        )
        self.belt = Product.objects.create(
            name="Leather Belt", price=Decimal("49.99"), inventory_quantity=10
        )
        self.draft = Product.objects.create(
            name="Draft Bag", price=Decimal("10.00"), is_published=False
        )

    def test_requires_auth(self):
        res = APIClient().get("/api/cart/")
        self.assertEqual(res.status_code, 401)

    def test_empty_cart(self):
        res = self.client.get("/api/cart/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["items"], [])
        self.assertEqual(res.data["item_count"], 0)
        self.assertEqual(res.data["subtotal"], "0.00")

    def test_add_and_upsert(self):
        res = self.client.post(
            "/api/cart/",
            {"product_id": str(self.jacket.id), "quantity": 1, "size": "M"},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)

        res = self.client.post(
            "/api/cart/add/",
            {"product_id": str(self.jacket.id), "quantity": 2, "color": "Brown"},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)

        self.assertEqual(len(res.data["items"]), 1)
        line = res.data["items"][0]
        self.assertEqual(line["quantity"], 3)
        self.assertEqual(line["size"], "M")
        self.assertEqual(line["color"], "Brown")
        self.assertEqual(line["product_slug"], "classic-leather-jacket")
        self.assertEqual(line["line_total"], "899.97")
        self.assertEqual(res.data["subtotal"], "899.97")

    def test_quantity_defaults_to_one(self):
        res = self.client.post("/api/cart/", {"product_id": str(self.belt.id)}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["item_count"], 1)

    def test_unpublished_product_is_404(self):
        res = self.client.post("/api/cart/", {"product_id": str(self.draft.id)}, format="json")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "PRODUCT_NOT_FOUND")

    def test_rejects_zero_quantity(self):
        res = self.client.post(
            "/api/cart/", {"product_id": str(self.belt.id), "quantity": 0}, format="json"
        )
        self.assertEqual(res.status_code, 400)

    def test_update_quantity(self):
        CartItem.objects.create(user=self.user, product=self.belt, quantity=1)

        res = self.client.patch(f"/api/cart/{self.belt.id}/", {"quantity": 4}, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["items"][0]["quantity"], 4)
        self.assertEqual(res.data["subtotal"], "199.96")

        res = self.client.put(f"/api/cart/{self.jacket.id}/", {"quantity": 2}, format="json")
        self.assertEqual(res.status_code, 404)

    def test_remove_and_clear(self):
        CartItem.objects.create(user=self.user, product=self.belt, quantity=1)
        CartItem.objects.create(user=self.user, product=self.jacket, quantity=1)

        res = self.client.delete(f"/api/cart/{self.belt.id}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["items"]), 1)

        res = self.client.delete(f"/api/cart/{self.belt.id}/")
        self.assertEqual(res.status_code, 404)

        res = self.client.delete("/api/cart/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["item_count"], 0)

    def test_carts_are_private(self):
        CartItem.objects.create(user=self.other, product=self.belt, quantity=2)

        res = self.client.get("/api/cart/")
        self.assertEqual(res.data["items"], [])

        res = self.client.delete(f"/api/cart/{self.belt.id}/")
        self.assertEqual(res.status_code, 404)
        self.assertTrue(CartItem.objects.filter(user=self.other).exists())

    def test_price_follows_product(self):
        CartItem.objects.create(user=self.user, product=self.belt, quantity=2)
        self.belt.price = Decimal("39.99")
        self.belt.save()

        res = self.client.get("/api/cart/")
        self.assertEqual(res.data["subtotal"], "79.98")
