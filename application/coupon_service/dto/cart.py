from typing import Annotated, List, Optional
from decimal import Decimal
from pydantic import BaseModel, Field, PlainSerializer

# Decimal amounts leave the API as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CartItem(BaseModel):
    """Cart item model"""
    product_id: int = Field(..., description="Unique identifier of the product")
    quantity: int = Field(..., ge=1, description="Quantity of the product in cart")
    price: Money = Field(..., ge=0, description="Price per unit of the product")


class CartRequest(BaseModel):
    """Cart sent to the applicable-coupons and apply-coupon endpoints"""
    items: List[CartItem] = Field(..., description="Array of cart items with product details")


class ApplicableCouponResponse(BaseModel):
    coupon_id: Optional[int]
    type: str
    discount: Money = Field(..., description="Total discount amount that can be applied")
    description: Optional[str] = None
    code: Optional[str] = None

    class Config:
        from_attributes = True


class ApplicableCouponsResponse(BaseModel):
    applicable_coupons: List[ApplicableCouponResponse]


class CartItemWithDiscount(BaseModel):
    """Cart item with the discount allocated to it"""
    product_id: int
    quantity: int
    price: Money
    total_discount: Money = Field(..., description="Total discount amount applied to this specific item")

    class Config:
        from_attributes = True


class UpdatedCart(BaseModel):
    items: List[CartItemWithDiscount]
    total_price: Money = Field(..., description="Total price before any discounts are applied")
    total_discount: Money = Field(..., description="Total discount amount applied across all items")
    final_price: Money = Field(..., description="Final price after all discounts are applied")

    class Config:
        from_attributes = True


class ApplyCouponResponse(BaseModel):
    updated_cart: UpdatedCart
