from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from coupon_service.core.constants import HUNDRED, MONEY_QUANT, ZERO
from coupon_service.coupons.rules import Cart


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def clamp_percentage(value: Decimal) -> Decimal:
    return min(max(value, ZERO), HUNDRED)


def cart_total(cart: Cart) -> Decimal:
    return sum((line.subtotal for line in cart), ZERO)


def product_quantities(cart: Cart, product_ids: Optional[Iterable[int]] = None) -> Dict[int, int]:
    """Total quantity per product id, summing duplicate lines."""
    wanted = set(product_ids) if product_ids is not None else None
    counts: Dict[int, int] = {}
    for line in cart:
        if wanted is None or line.product_id in wanted:
            counts[line.product_id] = counts.get(line.product_id, 0) + line.quantity
    return counts


def product_subtotal(cart: Cart, product_id: int) -> Decimal:
    return sum((line.subtotal for line in cart if line.product_id == product_id), ZERO)


def unit_price(cart: Cart, product_id: int) -> Optional[Decimal]:
    """Unit price of the first cart line carrying the product, or None when absent."""
    for line in cart:
        if line.product_id == product_id:
            return line.price
    return None
