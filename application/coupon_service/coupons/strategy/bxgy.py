from decimal import Decimal
from typing import Dict, List, Tuple

from coupon_service.core.constants import BxGyMatchPolicy, ZERO
from coupon_service.coupons.cart_totals import product_quantities, unit_price
from coupon_service.coupons.rules import BxGyRule, Cart, CouponRecord
from .base import BaseCouponStrategy


def count_repetitions(rule: BxGyRule, cart: Cart) -> int:
    """How many times the get bundle is granted for this cart, capped by repetition_limit.

    With the pooled policy the quantities of all buy products count together
    against the combined requirement, so 9 units of one product satisfy a
    "buy 3 of A and 3 of B" offer once. The strict policy needs every buy
    product to reach its own quantity.
    """
    buy_counts = product_quantities(cart, [p.product_id for p in rule.buy_products])

    if rule.match_policy == BxGyMatchPolicy.STRICT:
        repetitions = min(buy_counts.get(p.product_id, 0) // p.quantity for p in rule.buy_products)
    else:
        total_available = sum(buy_counts.get(p.product_id, 0) for p in rule.buy_products)
        total_required = sum(p.quantity for p in rule.buy_products)
        if total_required <= 0:
            return 0
        repetitions = total_available // total_required

    return max(min(repetitions, rule.repetition_limit), 0)


def free_quantities(rule: BxGyRule) -> Dict[int, int]:
    """Free units granted per repetition; get product ids are unique within a rule."""
    return {product.product_id: product.quantity for product in rule.get_products}


class BxGyStrategy(BaseCouponStrategy):
    """Buy a bundle of products, get other products free"""

    def compute_discount(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Decimal:
        rule = coupon.rule
        repetitions = count_repetitions(rule, cart)
        if repetitions <= 0:
            return ZERO

        cart_counts = product_quantities(cart, [p.product_id for p in rule.get_products])
        total_discount = ZERO
        for product in rule.get_products:
            price = unit_price(cart, product.product_id)
            if price is None:
                continue
            free_quantity = min(product.quantity * repetitions, cart_counts[product.product_id])
            total_discount += free_quantity * price

        return total_discount

    def apply_to_items(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Tuple[List[Decimal], Decimal]:
        repetitions = count_repetitions(coupon.rule, cart)
        per_repetition = free_quantities(coupon.rule)

        line_discounts = []
        for line in cart:
            if repetitions <= 0 or line.product_id not in per_repetition:
                line_discounts.append(ZERO)
                continue
            free_quantity = min(per_repetition[line.product_id] * repetitions, line.quantity)
            line_discounts.append(free_quantity * line.price)

        return line_discounts, sum(line_discounts, ZERO)
