"""
URL configuration for the coupons app.

Routes:
    - POST /validate/ - Coupon preview

All routes are prefixed with /api/v1/coupons/ when included in the main URLconf.
"""

from django.urls import path

from coupons.views import ValidateCouponView

app_name = "coupons"

urlpatterns = [
    path("validate/", ValidateCouponView.as_view(), name="validate"),
]
