from decimal import Decimal
from typing import List, Tuple

from coupon_service.core.constants import HUNDRED, ZERO
from coupon_service.coupons.cart_totals import clamp_percentage, product_subtotal, quantize_money
from coupon_service.coupons.rules import Cart, CouponRecord
from .base import BaseCouponStrategy


class ProductWiseStrategy(BaseCouponStrategy):
    """Percentage off the subtotal of a single product"""

    def compute_discount(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Decimal:
        rule = coupon.rule
        if not any(line.product_id == rule.product_id for line in cart):
            return ZERO

        line_subtotal = product_subtotal(cart, rule.product_id)
        percentage_discount = (line_subtotal * clamp_percentage(rule.discount)) / HUNDRED
        return self.cap_discount(coupon, percentage_discount)

    def apply_to_items(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Tuple[List[Decimal], Decimal]:
        product_id = coupon.rule.product_id
        discount_amount = self.compute_discount(coupon, cart, cart_total)
        combined_subtotal = product_subtotal(cart, product_id)

        line_discounts = []
        for line in cart:
            if line.product_id != product_id or combined_subtotal == 0:
                line_discounts.append(ZERO)
                continue
            line_discounts.append(quantize_money(discount_amount * line.subtotal / combined_subtotal))

        return line_discounts, discount_amount
