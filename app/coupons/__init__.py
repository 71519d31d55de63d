"""
Coupons app.

Discount coupons maintained by staff through the Django admin, and the
evaluator that decides whether a code applies to an order amount.
"""
