# support/admin.py
from django.contrib import admin

from .models import ContactMessage


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ("message_id", "email", "name", "status", "message_date", "responded_at")
    list_filter = ("status", "message_date")
    search_fields = ("email", "name", "message")
    ordering = ("-message_date",)
    readonly_fields = ("message_date", "responded_at", "updated_at")
