from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

# Constants
from coupon_service.core.constants import CouponType

# Rules
from coupon_service.coupons.rules import (
    AppliedCart, AppliedCartItem, ApplicableCoupon, Cart, CouponRecord, build_cart
)
from coupon_service.coupons.cart_totals import cart_total
from coupon_service.coupons.exceptions import UnsupportedRuleKind

# Validations
from coupon_service.validations.coupon_eligibility import CouponEligibilityValidator

# Strategies
from coupon_service.coupons.strategy.base import BaseCouponStrategy
from coupon_service.coupons.strategy.cart_wise import CartWiseStrategy
from coupon_service.coupons.strategy.product_wise import ProductWiseStrategy
from coupon_service.coupons.strategy.bxgy import BxGyStrategy

# Logging
from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("coupons.engine")

COUPON_STRATEGIES: Dict[str, BaseCouponStrategy] = {
    CouponType.CART_WISE: CartWiseStrategy(),
    CouponType.PRODUCT_WISE: ProductWiseStrategy(),
    CouponType.BXGY: BxGyStrategy(),
}


class CouponEngine:
    """Evaluates coupon rules against carts.

    The engine holds no state between calls: every method is a function of
    its arguments, never mutates them and performs no I/O, so one instance
    can be shared by concurrent requests.
    """

    def __init__(self, strategies: Optional[Dict[str, BaseCouponStrategy]] = None, suppress_error_logs: bool = False):
        """Initialize the engine with an optional strategy registry.
        Args:
            strategies: Mapping of coupon type to strategy, defaults to the three built-in kinds
            suppress_error_logs: If True, eligibility failures are logged at debug level
        """
        self.strategies = strategies if strategies is not None else COUPON_STRATEGIES
        self.suppress_error_logs = suppress_error_logs

    def get_strategy(self, coupon: CouponRecord) -> BaseCouponStrategy:
        strategy = self.strategies.get(coupon.type)
        if strategy is None:
            raise UnsupportedRuleKind(coupon.type, coupon_id=coupon.id)
        return strategy

    def compute_discount(self, coupon: CouponRecord, cart: Cart, total: Optional[Decimal] = None) -> Decimal:
        """Discount a coupon's rule gives on a cart, ignoring eligibility metadata.

        Args:
            coupon: Coupon to evaluate
            cart: Cart lines
            total: Precomputed cart subtotal, computed when omitted

        Returns:
            Discount amount, zero when the rule does not match

        Raises:
            UnsupportedRuleKind: If no strategy handles the coupon's type
        """
        cart = build_cart(cart)
        if total is None:
            total = cart_total(cart)
        return self.get_strategy(coupon).compute_discount(coupon, cart, total)

    def filter_applicable(self, coupons: Iterable[CouponRecord], cart: Cart, now: Optional[datetime] = None) -> List[ApplicableCoupon]:
        """Coupons that give a positive discount on the cart, in input order.

        Ineligible coupons, unknown rule kinds and zero discounts are skipped
        silently; nothing is raised for business outcomes.

        Args:
            coupons: Candidate coupons
            cart: Cart lines
            now: Evaluation time, defaults to the current UTC time

        Returns:
            One ApplicableCoupon per coupon that applies
        """
        cart = build_cart(cart)
        total = cart_total(cart)
        applicable_coupons = []

        for coupon in coupons:
            violation = CouponEligibilityValidator(coupon, total, now, suppress_error_logs=True).first_violation()
            if violation is not None:
                logger.debug(f"coupon_not_applicable | coupon_id={coupon.id} reason={violation.error_code}")
                continue

            try:
                discount = self.compute_discount(coupon, cart, total)
            except UnsupportedRuleKind:
                logger.warning(f"coupon_not_applicable | coupon_id={coupon.id} reason=unsupported_type type={coupon.type}")
                continue

            if discount <= 0:
                logger.debug(f"coupon_not_applicable | coupon_id={coupon.id} reason=zero_discount")
                continue

            applicable_coupons.append(ApplicableCoupon(
                coupon_id=coupon.id,
                type=coupon.type,
                discount=discount,
                description=coupon.description,
                code=coupon.code,
            ))

        logger.info(f"filter_applicable | cart_lines={len(cart)} cart_total={total} applicable={len(applicable_coupons)}")
        return applicable_coupons

    def apply_to_cart(self, coupon: CouponRecord, cart: Cart) -> AppliedCart:
        """Distribute one coupon's discount over the cart lines.

        Eligibility is not checked here; callers gate with `ensure_eligible`
        or use `apply_coupon`.

        Args:
            coupon: Coupon to apply
            cart: Cart lines

        Returns:
            AppliedCart with per-line discounts and totals

        Raises:
            UnsupportedRuleKind: If no strategy handles the coupon's type
        """
        cart = build_cart(cart)
        strategy = self.get_strategy(coupon)
        total = cart_total(cart)

        line_discounts, total_discount = strategy.apply_to_items(coupon, cart, total)
        items = [
            AppliedCartItem(product_id=line.product_id, quantity=line.quantity, price=line.price, total_discount=line_discount)
            for line, line_discount in zip(cart, line_discounts)
        ]

        logger.info(f"apply_to_cart | coupon_id={coupon.id} type={coupon.type} total_price={total} total_discount={total_discount}")
        return AppliedCart(
            items=items,
            total_price=total,
            total_discount=total_discount,
            final_price=total - total_discount,
        )

    def ensure_eligible(self, coupon: CouponRecord, cart: Cart, now: Optional[datetime] = None) -> None:
        """Raise the first eligibility failure for a direct apply request."""
        cart = build_cart(cart)
        validator = CouponEligibilityValidator(coupon, cart_total(cart), now, self.suppress_error_logs)
        validator.ensure_eligible()

    def apply_coupon(self, coupon: CouponRecord, cart: Cart, now: Optional[datetime] = None) -> AppliedCart:
        self.ensure_eligible(coupon, cart, now)
        return self.apply_to_cart(coupon, cart)


def filter_applicable(coupons: Iterable[CouponRecord], cart: Cart, now: Optional[datetime] = None) -> List[ApplicableCoupon]:
    return CouponEngine().filter_applicable(coupons, cart, now)


def apply_to_cart(coupon: CouponRecord, cart: Cart) -> AppliedCart:
    return CouponEngine().apply_to_cart(coupon, cart)
