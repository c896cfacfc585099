from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Tuple

from coupon_service.coupons.cart_totals import quantize_money
from coupon_service.coupons.rules import Cart, CouponRecord


class BaseCouponStrategy(ABC):
    @abstractmethod
    def compute_discount(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Decimal:
        pass

    @abstractmethod
    def apply_to_items(self, coupon: CouponRecord, cart: Cart, cart_total: Decimal) -> Tuple[List[Decimal], Decimal]:
        """Return the discount of every cart line (in cart order) and the coupon's total discount."""
        pass

    @staticmethod
    def cap_discount(coupon: CouponRecord, amount: Decimal) -> Decimal:
        if coupon.max_discount is not None:
            amount = min(amount, coupon.max_discount)
        return quantize_money(amount)
