# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from products.services.slugs import unique_slug

from .category import Category


class Product(models.Model):
    """
    Represents a sellable leather item.

    STOCK MODEL:
    - inventory_quantity is the single stock counter.
    - It is decremented only when an order is PAID (payment confirmed),
      never when an item is merely carted or ordered.

    VISIBILITY:
    - is_published=False hides the product from the storefront
      (admin endpoints still see it).
    - is_featured drives the home page carousel (?featured=true).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    slug = models.SlugField(max_length=280, unique=True, blank=True)
    description = models.TextField(blank=True, default="")

    # Current selling price (KES)
    price = models.DecimalField(max_digits=10, decimal_places=2)

    # Optional "was" price shown struck-through on the storefront
    compare_at_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    # Optional; NULL keeps the unique constraint happy for products without a SKU
    sku = models.CharField(max_length=128, unique=True, null=True, blank=True)

    inventory_quantity = models.PositiveIntegerField(default=0)

    image_url = models.URLField(max_length=500, blank=True, default="")
    gallery_images = models.JSONField(default=list, blank=True)

    materials = models.TextField(blank=True, default="")
    care_instructions = models.TextField(blank=True, default="")

    is_published = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["is_published", "created_at"],
                name="products_pr_is_publ_6f1c2a_idx",
            ),
            models.Index(fields=["is_featured"], name="products_pr_is_feat_3b8d0e_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    def clean(self):
        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError({"price": "Price must be greater than zero"})

        if self.compare_at_price is not None and Decimal(self.compare_at_price) <= 0:
            raise ValidationError(
                {"compare_at_price": "Compare-at price must be greater than zero"}
            )

        if not isinstance(self.gallery_images, list):
            raise ValidationError({"gallery_images": "gallery_images must be a list of URLs"})

    def save(self, *args, **kwargs):
        if self.sku is not None:
            self.sku = self.sku.strip().upper() or None
        if not self.slug:
            self.slug = unique_slug(Product, self.name, instance=self)
        super().save(*args, **kwargs)

    @property
    def in_stock(self) -> bool:
        return int(self.inventory_quantity or 0) > 0
