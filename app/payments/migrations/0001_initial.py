import uuid

import django.db.models.deletion
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        ("coupons", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
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
                    "gateway",
                    models.CharField(
                        choices=[
                            ("razorpay", "Razorpay"),
                            ("stripe", "Stripe"),
                            ("complimentary", "Complimentary"),
                        ],
                        default="razorpay",
                        max_length=20,
                    ),
                ),
                (
                    "gateway_order_id",
                    models.CharField(
                        help_text="Gateway order id (order_xxx) or Stripe Checkout Session id (cs_xxx)",
                        max_length=255,
                        unique=True,
                    ),
                ),
                (
                    "gateway_payment_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Gateway payment id (pay_xxx) or Stripe PaymentIntent id (pi_xxx)",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "gateway_signature",
                    models.CharField(
                        blank=True,
                        help_text="Signature supplied with the Razorpay payment callback",
                        max_length=255,
                    ),
                ),
                (
                    "amount",
                    models.PositiveIntegerField(
                        help_text="Final payable amount in minor units, after discount"
                    ),
                ),
                (
                    "base_amount",
                    models.PositiveIntegerField(
                        help_text="List price in minor units, before discount"
                    ),
                ),
                ("discount_amount", models.PositiveIntegerField(default=0)),
                (
                    "currency",
                    models.CharField(
                        default="INR",
                        help_text="ISO 4217 currency code (uppercase)",
                        max_length=3,
                    ),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("paid", "Paid"),
                            ("refunded", "Refunded"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Current payment status (managed by FSM)",
                        max_length=50,
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
                ("coupon_code", models.CharField(blank=True, max_length=50)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("refunded_at", models.DateTimeField(blank=True, null=True)),
                (
                    "refund_amount",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Amount returned to the customer in minor units",
                        null=True,
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Receipt, gateway notes and other order details",
                    ),
                ),
                (
                    "booking",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payments",
                        to="bookings.booking",
                    ),
                ),
                (
                    "coupon",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payments",
                        to="coupons.coupon",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["booking", "status"],
                        name="payments_pa_booking_6c0f3e_idx",
                    ),
                    models.Index(
                        fields=["gateway_payment_id", "status"],
                        name="payments_pa_gateway_9a1b2d_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        check=models.Q(("amount__lte", models.F("base_amount"))),
                        name="payment_amount_not_above_base",
                    )
                ],
            },
        ),
    ]
