import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "external_uid",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Booking identifier issued by the calendar provider",
                        max_length=100,
                    ),
                ),
                (
                    "session_type",
                    models.CharField(
                        choices=[
                            ("individual", "Individual"),
                            ("couples", "Couples"),
                            ("family", "Family"),
                            ("free", "Free consultation"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "session_format",
                    models.CharField(
                        choices=[
                            ("chat", "Chat"),
                            ("audio", "Audio"),
                            ("video", "Video"),
                            ("call", "Call"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "scheduled_date",
                    models.DateField(
                        blank=True,
                        help_text="Session date in the practice timezone",
                        null=True,
                    ),
                ),
                (
                    "scheduled_time",
                    models.CharField(
                        blank=True,
                        help_text='Session start as local wall-clock time, e.g. "4:30 PM"',
                        max_length=20,
                    ),
                ),
                ("timezone", models.CharField(default="Asia/Kolkata", max_length=64)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                ("customer_name", models.CharField(blank=True, max_length=200)),
                ("customer_email", models.EmailField(blank=True, max_length=254)),
                ("customer_phone", models.CharField(blank=True, max_length=30)),
            ],
            options={
                "verbose_name": "booking",
                "verbose_name_plural": "bookings",
                "ordering": ["-created_at"],
            },
        ),
    ]
