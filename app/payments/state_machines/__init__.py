"""
State machine enums for payment models.
"""

from payments.state_machines.states import GATEWAY_CURRENCIES, Gateway, PaymentStatus

__all__ = [
    "GATEWAY_CURRENCIES",
    "Gateway",
    "PaymentStatus",
]
