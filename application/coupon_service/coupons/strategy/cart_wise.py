from decimal import Decimal
from typing import List, Tuple

from coupon_service.core.constants import HUNDRED, ZERO
from coupon_service.coupons.cart_totals import clamp_percentage, quantize_money
from coupon_service.coupons.rules import Cart, CouponRecord
from .base import BaseCouponStrategy


class CartWiseStrategy(BaseCouponStrategy):
    """Percentage off the whole cart once the subtotal reaches the threshold"""

    def compute_discount(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Decimal:
        rule = coupon.rule
        if cart_total < rule.threshold:
            return ZERO

        percentage_discount = (cart_total * clamp_percentage(rule.discount)) / HUNDRED
        return self.cap_discount(coupon, percentage_discount)

    def apply_to_items(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Tuple[List[Decimal], Decimal]:
        discount_amount = self.compute_discount(coupon, cart, cart_total)
        if cart_total == 0:
            return [ZERO for _ in cart], discount_amount

        # Split by each line's share of the cart; rounding drift is left as is
        discount_ratio = discount_amount / cart_total
        line_discounts = [quantize_money(line.subtotal * discount_ratio) for line in cart]
        return line_discounts, discount_amount
