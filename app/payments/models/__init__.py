"""
Payment models.

Usage:
    from payments.models import Payment
"""

from payments.models.payment import Payment

__all__ = [
    "Payment",
]
