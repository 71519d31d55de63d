"""
Tests for ServiceResult and BaseService.
"""

import logging

import pytest

from core.exceptions import ConflictError
from core.services import BaseService, ServiceResult


class ExampleService(BaseService):
    pass


class TestServiceResult:
    def test_success(self):
        result = ServiceResult.success({"order_id": "order_1"})

        assert result.success is True
        assert bool(result) is True
        assert result.data == {"order_id": "order_1"}
        assert result.error is None

    def test_failure(self):
        result = ServiceResult.failure("Booking not found", error_code="BOOKING_NOT_FOUND")

        assert bool(result) is False
        assert result.to_response() == {
            "success": False,
            "error": "Booking not found",
            "error_code": "BOOKING_NOT_FOUND",
        }

    def test_failure_keeps_partial_data(self):
        result = ServiceResult.failure("Invalid", error_code="SIGNATURE_MISMATCH", data={"verified": False})

        assert result.data == {"verified": False}

    def test_failure_with_field_errors(self):
        result = ServiceResult.failure(
            "Invalid request",
            error_code="VALIDATION_ERROR",
            errors={"session_type": ["Invalid choice"]},
        )

        assert result.to_response()["errors"] == {"session_type": ["Invalid choice"]}

    def test_from_application_error_keeps_code(self):
        result = ServiceResult.from_exception(
            ConflictError("Payment is already refunded", error_code="PAYMENT_STATE_CONFLICT")
        )

        assert result.error == "Payment is already refunded"
        assert result.error_code == "PAYMENT_STATE_CONFLICT"

    def test_from_other_exception_uses_class_name(self):
        result = ServiceResult.from_exception(KeyError("gateway"))

        assert result.error_code == "KEYERROR"


class TestBaseService:
    def test_logger_named_after_service(self):
        assert ExampleService.get_logger().name == "core.tests.test_services.ExampleService"

    def test_handle_exception_logs_and_converts(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = ExampleService.handle_exception(
                ConflictError("Coupon sold out", error_code="COUPON_USAGE_LIMIT_REACHED"),
                "Redemption",
            )

        assert result.error_code == "COUPON_USAGE_LIMIT_REACHED"
        assert "Redemption: [COUPON_USAGE_LIMIT_REACHED] Coupon sold out" in caplog.text

    @pytest.mark.django_db
    def test_atomic_rolls_back(self):
        from bookings.models import Booking
        from bookings.tests.factories import BookingFactory

        with pytest.raises(RuntimeError):
            with ExampleService.atomic():
                BookingFactory()
                raise RuntimeError("boom")

        assert Booking.objects.count() == 0
