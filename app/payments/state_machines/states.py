"""
State enums for payment models.

These are Django TextChoices for database storage and admin integration.

Payment States:
    pending → paid → refunded

    A pending payment becomes paid when the gateway confirms it (Razorpay
    signature callback or Stripe webhook). A paid payment becomes refunded
    after the gateway accepts the refund. Nothing moves backwards and no
    record is deleted.
"""

from django.db import models


class PaymentStatus(models.TextChoices):
    """
    States for the Payment model lifecycle.

    Terminal state: REFUNDED
    """

    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    REFUNDED = "refunded", "Refunded"


class Gateway(models.TextChoices):
    """
    Payment gateway that issued an order.

    COMPLIMENTARY marks orders fully covered by a coupon; no gateway is
    involved and the payment is recorded as paid immediately.
    """

    RAZORPAY = "razorpay", "Razorpay"
    STRIPE = "stripe", "Stripe"
    COMPLIMENTARY = "complimentary", "Complimentary"


# Currency each gateway charges in
GATEWAY_CURRENCIES = {
    Gateway.RAZORPAY: "INR",
    Gateway.STRIPE: "USD",
}
