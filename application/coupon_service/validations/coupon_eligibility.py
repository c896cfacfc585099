from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from coupon_service.coupons.exceptions import (
    CouponError, CouponExpired, CouponInactive, MinimumCartValueNotMet, UsageLimitExceeded
)
from coupon_service.coupons.rules import CouponRecord
from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("coupons.validations.eligibility")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # Naive timestamps coming from storage are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CouponEligibilityValidator:
    """Checks whether a coupon may be used for a cart at a given moment.

    The checks run in a fixed order: active flag, expiry, usage limit,
    minimum cart value. `first_violation` reports the first failing check
    without raising, `ensure_eligible` raises it.
    """

    def __init__(self, coupon: CouponRecord, cart_total: Decimal, now: Optional[datetime] = None, suppress_error_logs: bool = False):
        self.coupon = coupon
        self.cart_total = cart_total
        self.now = as_utc(now) if now is not None else utc_now()
        self.suppress_error_logs = suppress_error_logs

    def validate_active(self) -> Optional[CouponError]:
        if not self.coupon.is_active:
            return CouponInactive(coupon_id=self.coupon.id)
        return None

    def validate_expiry(self) -> Optional[CouponError]:
        expires_at = self.coupon.expires_at
        if expires_at is not None and as_utc(expires_at) <= self.now:
            return CouponExpired(coupon_id=self.coupon.id)
        return None

    def validate_usage(self) -> Optional[CouponError]:
        max_usage = self.coupon.max_usage
        if max_usage is not None and self.coupon.usage_count >= max_usage:
            return UsageLimitExceeded(coupon_id=self.coupon.id)
        return None

    def validate_min_cart_value(self) -> Optional[CouponError]:
        min_cart_value = self.coupon.min_cart_value
        if min_cart_value is not None and self.cart_total < min_cart_value:
            return MinimumCartValueNotMet(required=min_cart_value, provided=self.cart_total, coupon_id=self.coupon.id)
        return None

    def first_violation(self) -> Optional[CouponError]:
        for check in (self.validate_active, self.validate_expiry, self.validate_usage, self.validate_min_cart_value):
            error = check()
            if error is not None:
                return error
        return None

    def ensure_eligible(self) -> None:
        error = self.first_violation()
        if error is None:
            return
        if not self.suppress_error_logs:
            logger.warning(f"coupon_not_eligible | coupon_id={self.coupon.id} error_code={error.error_code} message={error.message}")
        raise error
