"""
Gateway webhook endpoints.

Only Stripe confirms payments by webhook; Razorpay confirmations arrive
through the verify endpoint.
"""
