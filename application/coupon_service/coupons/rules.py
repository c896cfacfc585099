"""
Coupon rule and cart value types used by the discount engine.

Every rule kind is a frozen dataclass checked at construction time, so the
engine never has to inspect the shape of a details blob. `rule_from_details`
is the single place where stored/requested `details` dicts become rules.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import ClassVar, Dict, Iterable, List, Optional, Tuple, Union

from coupon_service.core.constants import BxGyMatchPolicy, CouponType, HUNDRED, ZERO
from coupon_service.coupons.exceptions import InvalidCouponRule, UnsupportedRuleKind


def to_decimal(value, name: str = "value") -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise InvalidCouponRule(f"{name} must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidCouponRule(f"{name} must be a number")


def _to_int(value, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidCouponRule(f"{name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidCouponRule(f"{name} must be an integer")
    if number != value and not isinstance(value, str):
        raise InvalidCouponRule(f"{name} must be an integer")
    return number


def _to_product_id(value) -> int:
    product_id = _to_int(value, "product_id")
    if product_id <= 0:
        raise InvalidCouponRule("product_id must be greater than 0")
    return product_id


def _check_percentage(value: Decimal, name: str = "discount") -> None:
    if value < ZERO or value > HUNDRED:
        raise InvalidCouponRule(f"{name} must be between 0 and 100")


@dataclass(frozen=True)
class CartLine:
    product_id: int
    quantity: int
    price: Decimal

    def __post_init__(self):
        object.__setattr__(self, "price", to_decimal(self.price, "price"))

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


Cart = Tuple[CartLine, ...]


def build_cart(items: Iterable) -> Cart:
    """Build an immutable cart from dicts or objects exposing product_id/quantity/price."""
    lines = []
    for item in items:
        if isinstance(item, CartLine):
            lines.append(item)
        elif isinstance(item, dict):
            lines.append(CartLine(item["product_id"], item["quantity"], item["price"]))
        else:
            lines.append(CartLine(item.product_id, item.quantity, item.price))
    return tuple(lines)


@dataclass(frozen=True)
class BxGyProduct:
    product_id: int
    quantity: int

    def __post_init__(self):
        object.__setattr__(self, "product_id", _to_product_id(self.product_id))
        object.__setattr__(self, "quantity", _to_int(self.quantity, "quantity"))
        if self.quantity <= 0:
            raise InvalidCouponRule("BxGy product quantity must be greater than 0")


@dataclass(frozen=True)
class CartWiseRule:
    kind: ClassVar[str] = CouponType.CART_WISE

    threshold: Decimal
    discount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "threshold", to_decimal(self.threshold, "threshold"))
        object.__setattr__(self, "discount", to_decimal(self.discount, "discount"))
        if self.threshold < ZERO:
            raise InvalidCouponRule("threshold must be greater than or equal to 0")
        _check_percentage(self.discount)

    def to_details(self) -> Dict:
        return {"threshold": float(self.threshold), "discount": float(self.discount)}


@dataclass(frozen=True)
class ProductWiseRule:
    kind: ClassVar[str] = CouponType.PRODUCT_WISE

    product_id: int
    discount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "product_id", _to_product_id(self.product_id))
        object.__setattr__(self, "discount", to_decimal(self.discount, "discount"))
        _check_percentage(self.discount)

    def to_details(self) -> Dict:
        return {"product_id": self.product_id, "discount": float(self.discount)}


@dataclass(frozen=True)
class BxGyRule:
    kind: ClassVar[str] = CouponType.BXGY

    buy_products: Tuple[BxGyProduct, ...]
    get_products: Tuple[BxGyProduct, ...]
    repetition_limit: int
    match_policy: str = BxGyMatchPolicy.POOLED

    def __post_init__(self):
        object.__setattr__(self, "buy_products", tuple(self.buy_products))
        object.__setattr__(self, "get_products", tuple(self.get_products))
        object.__setattr__(self, "repetition_limit", _to_int(self.repetition_limit, "repetition_limit"))
        if not self.buy_products:
            raise InvalidCouponRule("buy_products must not be empty")
        if not self.get_products:
            raise InvalidCouponRule("get_products must not be empty")
        get_ids = [p.product_id for p in self.get_products]
        if len(set(get_ids)) != len(get_ids):
            raise InvalidCouponRule("get_products must not repeat a product_id")
        if self.repetition_limit <= 0:
            raise InvalidCouponRule("repetition_limit must be greater than 0")
        if self.match_policy not in BxGyMatchPolicy.ALL:
            raise InvalidCouponRule(f"match_policy must be one of {list(BxGyMatchPolicy.ALL)}")

    def to_details(self) -> Dict:
        return {
            "buy_products": [{"product_id": p.product_id, "quantity": p.quantity} for p in self.buy_products],
            "get_products": [{"product_id": p.product_id, "quantity": p.quantity} for p in self.get_products],
            "repetition_limit": self.repetition_limit,
            "match_policy": self.match_policy,
        }


CouponRule = Union[CartWiseRule, ProductWiseRule, BxGyRule]


@dataclass(frozen=True)
class CouponRecord:
    """A coupon rule together with its eligibility and display metadata."""

    id: Optional[int]
    rule: CouponRule
    is_active: bool = True
    expires_at: Optional[datetime] = None
    usage_count: int = 0
    max_usage: Optional[int] = None
    min_cart_value: Optional[Decimal] = None
    max_discount: Optional[Decimal] = None
    description: Optional[str] = None
    code: Optional[str] = None

    def __post_init__(self):
        if self.min_cart_value is not None:
            object.__setattr__(self, "min_cart_value", to_decimal(self.min_cart_value, "min_cart_value"))
        if self.max_discount is not None:
            object.__setattr__(self, "max_discount", to_decimal(self.max_discount, "max_discount"))

    @property
    def type(self) -> str:
        return getattr(self.rule, "kind", type(self.rule).__name__)


def _bxgy_products(raw, name: str) -> List[BxGyProduct]:
    if not isinstance(raw, list):
        raise InvalidCouponRule(f"{name} must be a list")
    products = []
    for entry in raw:
        if not isinstance(entry, dict) or "product_id" not in entry or "quantity" not in entry:
            raise InvalidCouponRule(f"{name} entries need product_id and quantity")
        products.append(BxGyProduct(entry["product_id"], entry["quantity"]))
    return products


def rule_from_details(coupon_type: str, details: Dict) -> CouponRule:
    """Convert a coupon `type` + `details` pair into an engine rule.

    Raises:
        UnsupportedRuleKind: if the type is not a known coupon kind
        InvalidCouponRule: if the details do not fit the kind
    """
    if coupon_type not in CouponType.ALL:
        raise UnsupportedRuleKind(coupon_type)
    if not isinstance(details, dict):
        raise InvalidCouponRule("details must be an object")

    try:
        if coupon_type == CouponType.CART_WISE:
            return CartWiseRule(threshold=details["threshold"], discount=details["discount"])
        if coupon_type == CouponType.PRODUCT_WISE:
            return ProductWiseRule(product_id=details["product_id"], discount=details["discount"])
        return BxGyRule(
            buy_products=_bxgy_products(details["buy_products"], "buy_products"),
            get_products=_bxgy_products(details["get_products"], "get_products"),
            repetition_limit=details["repetition_limit"],
            match_policy=details.get("match_policy") or BxGyMatchPolicy.POOLED,
        )
    except KeyError as e:
        raise InvalidCouponRule(f"details for {coupon_type} coupon is missing {e.args[0]}")


@dataclass(frozen=True)
class ApplicableCoupon:
    coupon_id: Optional[int]
    type: str
    discount: Decimal
    description: Optional[str] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class AppliedCartItem:
    product_id: int
    quantity: int
    price: Decimal
    total_discount: Decimal


@dataclass(frozen=True)
class AppliedCart:
    items: List[AppliedCartItem] = field(default_factory=list)
    total_price: Decimal = ZERO
    total_discount: Decimal = ZERO
    final_price: Decimal = ZERO
