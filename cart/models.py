# cart/models.py
from django.core.validators import MinValueValidator
from django.db import models

from catalog.models import Headphone


class CartSession(models.Model):
    session_id = models.AutoField(primary_key=True)
    # opaque id minted by the client (localStorage), not the Django session key
    user_identifier = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_modified = models.DateTimeField(auto_now=True)

    def __str__(self): return f"Cart#{self.pk}"

    def items(self):
        return self.cart_items.select_related("product").order_by("cart_item_id")


class CartItem(models.Model):
    cart_item_id = models.AutoField(primary_key=True)
    session = models.ForeignKey(CartSession, on_delete=models.CASCADE, related_name="cart_items")
    product = models.ForeignKey(Headphone, on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["session", "product"], name="uniq_cart_line_per_product"),
        ]

    def __str__(self): return f"{self.quantity} x {self.product_id} in cart {self.session_id}"

    def as_row(self) -> dict:
        p = self.product
        return {
            "cart_item_id": self.cart_item_id,
            "product_id": p.product_id,
            "name": p.name,
            "price": p.price,
            "quantity": self.quantity,
            "stock_quantity": p.stock_quantity,
            "image_url": p.image_url,
        }
