from django.contrib import admin

from .models import Headphone


@admin.register(Headphone)
class HeadphoneAdmin(admin.ModelAdmin):
    list_display  = ("product_id", "name", "price", "stock_quantity", "updated_at")
    search_fields = ("name", "description")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("product_id",)

    fieldsets = (
        ("Basics", {
            "fields": ("name", "description", "price", "image_url"),
        }),
        ("Inventory", {
            "fields": ("stock_quantity", "created_at", "updated_at"),
        }),
    )
