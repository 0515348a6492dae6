from django.db import models
from django.utils import timezone

from catalog.models import Headphone


class Order(models.Model):
    STATUS_CHOICES = [("pending","Pending"),("paid","Paid"),("failed","Failed"),("canceled","Canceled")]

    order_id          = models.AutoField(primary_key=True)
    email             = models.EmailField(blank=True)
    currency          = models.CharField(max_length=10, default="usd")
    total_price       = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    status            = models.CharField(max_length=12, choices=STATUS_CHOICES, default="pending")
    payment_intent_id = models.CharField(max_length=128, unique=True)
    metadata          = models.JSONField(blank=True, default=dict)
    # order was reconstructed by the payment-verify endpoint, not the webhook
    created_by_verification = models.BooleanField(default=False)
    created_at        = models.DateTimeField(auto_now_add=True)
    updated_at        = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    @property
    def display_number(self) -> str:
        return f"BP-{self.pk:06d}" if self.pk else "#?"

    def __str__(self) -> str:
        return f"Order {self.display_number} ({self.status})"

    def mark_paid(self):
        if self.status == "paid":
            return
        self.status = "paid"
        self.save(update_fields=["status", "updated_at"])

    def mark_failed(self):
        self.status = "failed"
        self.save(update_fields=["status", "updated_at"])


class OrderItem(models.Model):
    order         = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product       = models.ForeignKey(Headphone, null=True, blank=True, on_delete=models.SET_NULL, related_name="order_items")
    product_name  = models.CharField(max_length=200)
    quantity      = models.PositiveIntegerField(default=1)
    price_at_time = models.DecimalField(max_digits=10, decimal_places=2)

    @property
    def subtotal(self):
        return self.price_at_time * self.quantity

    def __str__(self) -> str:
        return f"{self.quantity} x {self.product_name}"


class Payment(models.Model):
    order                  = models.OneToOneField(Order, related_name="payment", on_delete=models.CASCADE)
    stripe_payment_id      = models.CharField(max_length=128)
    payment_status         = models.CharField(max_length=32, default="pending")
    amount_received        = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_method_details = models.JSONField(blank=True, null=True, default=dict)
    payment_date           = models.DateTimeField(blank=True, null=True)

    def __str__(self) -> str:
        return f"Payment {self.stripe_payment_id} ({self.payment_status})"

    def mark_succeeded(self):
        self.payment_status = "succeeded"
        if not self.payment_date:
            self.payment_date = timezone.now()
        self.save(update_fields=["payment_status", "payment_date"])
