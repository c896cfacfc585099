"""
Core constants for the Coupon Service

Coupon kinds, BxGy matching policies, error codes and money precision
shared by the engine, the validators and the API layer.
"""
from decimal import Decimal


class CouponType:
    CART_WISE = "cart-wise"
    PRODUCT_WISE = "product-wise"
    BXGY = "bxgy"

    ALL = (CART_WISE, PRODUCT_WISE, BXGY)


class BxGyMatchPolicy:
    """How buy-product quantities count towards one repetition of a BxGy offer"""

    # Quantities of all buy products are pooled against the combined requirement
    POOLED = "pooled"
    # Every buy product has to meet its own required quantity
    STRICT = "strict"

    ALL = (POOLED, STRICT)


class CouponErrorCode:
    COUPON_NOT_FOUND = "COUPON_NOT_FOUND"
    COUPON_INACTIVE = "COUPON_INACTIVE"
    COUPON_EXPIRED = "COUPON_EXPIRED"
    USAGE_LIMIT_EXCEEDED = "USAGE_LIMIT_EXCEEDED"
    MIN_CART_VALUE_NOT_MET = "MIN_CART_VALUE_NOT_MET"
    UNSUPPORTED_RULE_KIND = "UNSUPPORTED_RULE_KIND"
    INVALID_COUPON_RULE = "INVALID_COUPON_RULE"
    INVALID_COUPON_DETAILS = "INVALID_COUPON_DETAILS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


MONEY_QUANT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")
