# payment/admin.py
from django.contrib import admin
from django.utils.html import format_html
import json

from .models import Order, OrderItem, Payment


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product", "product_name", "price_at_time", "quantity")
    readonly_fields = ("product", "product_name", "price_at_time", "quantity")


class PaymentInline(admin.StackedInline):
    model = Payment
    extra = 0
    readonly_fields = ("stripe_payment_id", "payment_status", "amount_received", "payment_date")
    exclude = ("payment_method_details",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    inlines = [OrderItemInline, PaymentInline]

    list_display = (
        "display_number", "status", "total_price", "currency",
        "email", "created_by_verification", "created_at",
    )
    list_filter = ("status", "currency", "created_by_verification", "created_at")
    search_fields = ("payment_intent_id", "email")
    ordering = ("-created_at",)

    readonly_fields = (
        "payment_intent_id", "total_price", "currency", "created_at", "updated_at",
        "created_by_verification", "metadata_pretty",
    )

    fieldsets = (
        ("Order", {
            "fields": (
                "status", "total_price", "currency", "email",
                "payment_intent_id", "created_by_verification",
                "created_at", "updated_at",
            )
        }),
        ("Evidence", {
            "classes": ("collapse",),
            "fields": ("metadata_pretty",),
        }),
    )

    @admin.display(description="Order")
    def display_number(self, obj):
        return obj.display_number

    @admin.display(description="Intent metadata (raw)")
    def metadata_pretty(self, obj):
        if not obj.metadata:
            return "-"
        pretty = json.dumps(obj.metadata, indent=2, sort_keys=True)
        # <pre> prevents long JSON from breaking layout
        return format_html("<pre style='white-space:pre-wrap'>{}</pre>", pretty)
