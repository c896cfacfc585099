from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from coupon_service.core.constants import BxGyMatchPolicy, CouponType
from coupon_service.coupons.rules import rule_from_details
from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("coupons.validations.details")


class CartWiseDetails(BaseModel):
    threshold: Decimal = Field(..., ge=0, description="Minimum cart value required to apply this coupon")
    discount: Decimal = Field(..., ge=0, le=100, description="Discount percentage to apply")


class ProductWiseDetails(BaseModel):
    product_id: int = Field(..., gt=0, description="Product ID to apply discount on")
    discount: Decimal = Field(..., ge=0, le=100, description="Discount percentage to apply on the specific product")


class BxGyProductDetails(BaseModel):
    product_id: int = Field(..., gt=0, description="Product ID for buy/get offer")
    quantity: int = Field(..., ge=1, description="Quantity required for this product in the offer")


class BxGyDetails(BaseModel):
    buy_products: List[BxGyProductDetails] = Field(..., min_length=1, description="Products to buy to qualify for the offer")
    get_products: List[BxGyProductDetails] = Field(..., min_length=1, description="Products to get for free when conditions are met")
    repetition_limit: int = Field(..., ge=1, description="Maximum number of times this offer can be applied")
    match_policy: str = Field(BxGyMatchPolicy.POOLED, description="pooled: buy quantities count together, strict: each buy product must be met")

    @field_validator("get_products")
    def validate_unique_get_products(cls, v):
        product_ids = [p.product_id for p in v]
        if len(set(product_ids)) != len(product_ids):
            raise ValueError("get_products must not repeat a product_id")
        return v

    @field_validator("match_policy")
    def validate_match_policy(cls, v):
        if v not in BxGyMatchPolicy.ALL:
            raise ValueError(f"match_policy must be one of {list(BxGyMatchPolicy.ALL)}")
        return v


DETAILS_MODELS = {
    CouponType.CART_WISE: CartWiseDetails,
    CouponType.PRODUCT_WISE: ProductWiseDetails,
    CouponType.BXGY: BxGyDetails,
}


def _format_errors(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        field_path = " -> ".join(str(loc) for loc in err.get("loc", []))
        messages.append(f"{field_path}: {err.get('msg', 'Invalid input')}" if field_path else err.get("msg", "Invalid input"))
    return "; ".join(messages)


def normalize_details(coupon_type: str, details: Any) -> Dict:
    """Validate `details` against the coupon type and return its stored form.

    Raises:
        ValueError: With a readable message when the type is unknown or the details do not fit it
    """
    model = DETAILS_MODELS.get(coupon_type)
    if model is None:
        raise ValueError(f"type must be one of {list(CouponType.ALL)}")
    if not isinstance(details, dict):
        raise ValueError("details must be an object")

    try:
        validated = model.model_validate(details)
    except ValidationError as e:
        message = _format_errors(e)
        logger.warning(f"invalid_coupon_details | type={coupon_type} errors={message}")
        raise ValueError(f"Invalid details for {coupon_type} coupon: {message}")

    return rule_from_details(coupon_type, validated.model_dump()).to_details()
