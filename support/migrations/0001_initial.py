import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ContactMessage",
            fields=[
                ("message_id", models.AutoField(primary_key=True, serialize=False)),
                ("name", models.CharField(blank=True, max_length=120)),
                ("email", models.EmailField(max_length=254)),
                ("message", models.TextField()),
                ("message_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("status", models.CharField(choices=[("UNREAD", "Unread"), ("READ", "Read"), ("RESPONDED", "Responded")], default="UNREAD", max_length=10)),
                ("admin_response", models.TextField(blank=True)),
                ("responded_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-message_date"],
                "indexes": [models.Index(fields=["status", "message_date"], name="support_msg_status_date_idx")],
            },
        ),
    ]
