from decimal import Decimal
from typing import Dict, Optional

from coupon_service.core.constants import CouponErrorCode


class CouponError(Exception):
    """Base class for failures raised while applying a coupon to a cart."""

    error_code = CouponErrorCode.INVALID_COUPON_RULE
    default_message = "Coupon cannot be applied"

    def __init__(self, message: Optional[str] = None, coupon_id: Optional[int] = None):
        self.message = message or self.default_message
        self.coupon_id = coupon_id
        super().__init__(self.message)

    def to_detail(self) -> Dict:
        return {"error_code": self.error_code, "message": self.message}


class CouponInactive(CouponError):
    error_code = CouponErrorCode.COUPON_INACTIVE
    default_message = "Coupon is not active"


class CouponExpired(CouponError):
    error_code = CouponErrorCode.COUPON_EXPIRED
    default_message = "Coupon has expired"


class UsageLimitExceeded(CouponError):
    error_code = CouponErrorCode.USAGE_LIMIT_EXCEEDED
    default_message = "Coupon usage limit exceeded"


class MinimumCartValueNotMet(CouponError):
    error_code = CouponErrorCode.MIN_CART_VALUE_NOT_MET

    def __init__(self, required: Decimal, provided: Decimal, coupon_id: Optional[int] = None):
        self.required = required
        self.provided = provided
        super().__init__(f"Minimum cart value of {required} required", coupon_id)

    def to_detail(self) -> Dict:
        detail = super().to_detail()
        detail["details"] = {"required": str(self.required), "provided": str(self.provided)}
        return detail


class UnsupportedRuleKind(CouponError):
    error_code = CouponErrorCode.UNSUPPORTED_RULE_KIND

    def __init__(self, kind, coupon_id: Optional[int] = None):
        self.kind = kind
        super().__init__(f"Unsupported coupon type: {kind}", coupon_id)


class InvalidCouponRule(CouponError, ValueError):
    """Raised when a rule is constructed with out-of-range or malformed values."""

    error_code = CouponErrorCode.INVALID_COUPON_RULE
    default_message = "Invalid coupon details"
