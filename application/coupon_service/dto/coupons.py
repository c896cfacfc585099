from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from coupon_service.core.constants import CouponType
from coupon_service.dto.cart import Money
from coupon_service.validations.coupon_details import normalize_details


class CreateCouponRequest(BaseModel):
    type: str = Field(..., description="Type of coupon discount: cart-wise, product-wise or bxgy")
    details: Dict[str, Any] = Field(..., description="Coupon details based on type")
    is_active: bool = Field(True, description="Whether coupon is active and can be used")
    expires_at: Optional[datetime] = Field(None, description="Expiration date when coupon becomes invalid")
    max_usage: Optional[int] = Field(None, ge=1, description="Maximum number of times this coupon can be used")
    min_cart_value: Optional[Money] = Field(None, ge=0, description="Minimum cart value required to apply this coupon")
    max_discount: Optional[Money] = Field(None, ge=0, description="Maximum discount amount that can be applied")
    description: Optional[str] = Field(None, description="Human-readable description of the coupon offer")
    code: Optional[str] = Field(None, max_length=50, description="Unique coupon code for customer use")

    @field_validator("type")
    def validate_type(cls, v):
        if v not in CouponType.ALL:
            raise ValueError(f"type must be one of {list(CouponType.ALL)}")
        return v

    @model_validator(mode="after")
    def validate_details_for_type(self):
        self.details = normalize_details(self.type, self.details)
        return self


class UpdateCouponRequest(BaseModel):
    """Partial update; details are re-validated against the resulting type by the service"""
    type: Optional[str] = Field(None, description="Type of coupon discount")
    details: Optional[Dict[str, Any]] = Field(None, description="Coupon details based on type")
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None
    max_usage: Optional[int] = Field(None, ge=1)
    min_cart_value: Optional[Money] = Field(None, ge=0)
    max_discount: Optional[Money] = Field(None, ge=0)
    description: Optional[str] = None
    code: Optional[str] = Field(None, max_length=50)

    @field_validator("type")
    def validate_type(cls, v):
        if v is not None and v not in CouponType.ALL:
            raise ValueError(f"type must be one of {list(CouponType.ALL)}")
        return v


class CouponResponse(BaseModel):
    id: int
    type: str
    details: Dict[str, Any]
    is_active: bool
    expires_at: Optional[datetime] = None
    usage_count: int
    max_usage: Optional[int] = None
    min_cart_value: Optional[Money] = None
    max_discount: Optional[Money] = None
    description: Optional[str] = None
    code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
