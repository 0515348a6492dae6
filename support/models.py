# support/models.py
from django.db import models
from django.utils import timezone


class ContactMessage(models.Model):
    UNREAD = "UNREAD"
    READ = "READ"
    RESPONDED = "RESPONDED"
    STATUS_CHOICES = [(UNREAD, "Unread"), (READ, "Read"), (RESPONDED, "Responded")]

    message_id     = models.AutoField(primary_key=True)
    name           = models.CharField(max_length=120, blank=True)
    email          = models.EmailField()
    message        = models.TextField()
    message_date   = models.DateTimeField(default=timezone.now)
    status         = models.CharField(max_length=10, choices=STATUS_CHOICES, default=UNREAD)
    admin_response = models.TextField(blank=True)
    responded_at   = models.DateTimeField(null=True, blank=True)
    updated_at     = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-message_date"]
        indexes = [models.Index(fields=["status", "message_date"], name="support_msg_status_date_idx")]

    def __str__(self):
        return f"Message #{self.pk} from {self.email} ({self.status})"

    def as_row(self) -> dict:
        return {
            "message_id": self.message_id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "message_date": self.message_date,
            "status": self.status,
            "admin_response": self.admin_response or None,
            "responded_at": self.responded_at,
        }
