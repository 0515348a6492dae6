# cart/admin.py
from django.contrib import admin

from .models import CartItem, CartSession


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("product", "quantity", "added_at")
    readonly_fields = ("added_at",)


@admin.register(CartSession)
class CartSessionAdmin(admin.ModelAdmin):
    inlines = [CartItemInline]
    list_display = ("session_id", "user_identifier", "created_at", "last_modified")
    search_fields = ("user_identifier",)
    ordering = ("-last_modified",)
    readonly_fields = ("created_at", "last_modified")
