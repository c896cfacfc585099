from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from coupon_service.coupons.exceptions import (
    CouponExpired, CouponInactive, MinimumCartValueNotMet, UsageLimitExceeded
)
from coupon_service.coupons.rules import CartWiseRule, CouponRecord
from coupon_service.validations.coupon_eligibility import CouponEligibilityValidator

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def record(**kwargs):
    return CouponRecord(id=1, rule=CartWiseRule(0, 10), **kwargs)


def test_eligible_coupon_has_no_violation():
    validator = CouponEligibilityValidator(record(max_usage=3, usage_count=2, min_cart_value=100), Decimal("100"), NOW)
    assert validator.first_violation() is None
    validator.ensure_eligible()


def test_checks_run_in_order():
    coupon = record(is_active=False, expires_at=NOW - timedelta(days=1), max_usage=1, usage_count=1)
    assert isinstance(CouponEligibilityValidator(coupon, Decimal("0"), NOW).first_violation(), CouponInactive)


def test_expiry_at_now_is_expired():
    validator = CouponEligibilityValidator(record(expires_at=NOW), Decimal("10"), NOW)
    with pytest.raises(CouponExpired):
        validator.ensure_eligible()


def test_naive_expiry_is_utc():
    naive_future = datetime(2026, 6, 1, 12, 30)
    validator = CouponEligibilityValidator(record(expires_at=naive_future), Decimal("10"), NOW)
    assert validator.first_violation() is None


def test_usage_limit_reached():
    validator = CouponEligibilityValidator(record(max_usage=2, usage_count=2), Decimal("10"), NOW)
    with pytest.raises(UsageLimitExceeded):
        validator.ensure_eligible()


def test_no_usage_limit_means_unlimited():
    validator = CouponEligibilityValidator(record(usage_count=10_000), Decimal("10"), NOW)
    assert validator.first_violation() is None


def test_min_cart_value_detail():
    validator = CouponEligibilityValidator(record(min_cart_value=Decimal("50.00")), Decimal("49.99"), NOW)
    error = validator.first_violation()

    assert isinstance(error, MinimumCartValueNotMet)
    assert error.to_detail() == {
        "error_code": "MIN_CART_VALUE_NOT_MET",
        "message": "Minimum cart value of 50.00 required",
        "details": {"required": "50.00", "provided": "49.99"},
    }
