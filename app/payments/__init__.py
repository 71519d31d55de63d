"""
Payments app for therapy session orders.

This app handles:
- Session pricing (INR and USD)
- Order creation through Razorpay or Stripe Checkout
- Payment confirmation (Razorpay signature callback, Stripe webhook)
- Cancellation refunds

Related apps:
    - coupons: Discount evaluation and redemption counting
    - bookings: Scheduled session times for the refund policy

Usage:
    from payments.services import CreateOrderInput, OrderService

    result = OrderService.create_order(
        CreateOrderInput(session_type="individual", session_format="video")
    )
"""
