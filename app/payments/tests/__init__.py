"""
Tests for payments app.

This package contains test modules for:
- test_pricing.py, test_refund_policy.py, test_signatures.py: Pure helpers
- test_models.py: Payment state machine
- test_*_service.py: Order, verification, refund and payment services
- test_views.py: API endpoint tests

Usage:
    pytest app/payments/tests/
    pytest app/payments/tests/test_refund_service.py
"""
