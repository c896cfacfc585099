from typing import Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

# Repository
from coupon_service.repository.coupons import CouponsRepository, to_coupon_record

# Coupon engine
from coupon_service.coupons.engine import CouponEngine
from coupon_service.coupons.exceptions import CouponError
from coupon_service.coupons.rules import AppliedCart, ApplicableCoupon, build_cart

# Models
from coupon_service.models.coupons import Coupon

# Constants
from coupon_service.core.constants import CouponErrorCode

# DTOs
from coupon_service.dto.cart import CartRequest
from coupon_service.dto.coupons import CreateCouponRequest, UpdateCouponRequest

# Validations
from coupon_service.validations.coupon_details import normalize_details

# Logging
from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("coupons.service")

# Columns that cannot be cleared through a partial update
NON_NULLABLE_FIELDS = ("type", "details", "is_active")


class CouponService:
    """Service for coupon CRUD and for evaluating coupons against carts"""

    def __init__(self, db: Session):
        self.repository = CouponsRepository(db)
        self.engine = CouponEngine()

    async def create_coupon(self, request: CreateCouponRequest) -> Coupon:
        return self.repository.create(request.model_dump())

    async def list_coupons(self) -> List[Coupon]:
        return self.repository.list_all()

    async def get_coupon(self, coupon_id: int) -> Coupon:
        coupon = self.repository.get(coupon_id)
        if not coupon:
            logger.warning(f"coupon_not_found | coupon_id={coupon_id}")
            raise HTTPException(
                status_code=404,
                detail={"error_code": CouponErrorCode.COUPON_NOT_FOUND, "message": f"Coupon with ID {coupon_id} not found"}
            )
        return coupon

    async def update_coupon(self, coupon_id: int, request: UpdateCouponRequest) -> Coupon:
        coupon = await self.get_coupon(coupon_id)
        values: Dict = request.model_dump(exclude_unset=True)
        for field_name in NON_NULLABLE_FIELDS:
            if field_name in values and values[field_name] is None:
                values.pop(field_name)

        if "type" in values or "details" in values:
            coupon_type = values.get("type", coupon.type)
            if coupon_type != coupon.type and "details" not in values:
                raise HTTPException(
                    status_code=400,
                    detail={"error_code": CouponErrorCode.INVALID_COUPON_DETAILS, "message": "details are required when changing the coupon type"}
                )
            try:
                values["details"] = normalize_details(coupon_type, values.get("details", coupon.details))
            except ValueError as e:
                raise HTTPException(
                    status_code=400,
                    detail={"error_code": CouponErrorCode.INVALID_COUPON_DETAILS, "message": str(e)}
                )

        return self.repository.update(coupon, values)

    async def delete_coupon(self, coupon_id: int) -> None:
        coupon = await self.get_coupon(coupon_id)
        self.repository.delete(coupon)

    async def get_applicable_coupons(self, cart: CartRequest) -> List[ApplicableCoupon]:
        records = []
        for coupon in self.repository.list_active():
            try:
                records.append(to_coupon_record(coupon))
            except CouponError as e:
                # A stored coupon the engine cannot read is left out of the listing
                logger.warning(f"coupon_record_skipped | coupon_id={coupon.id} type={coupon.type} error_code={e.error_code} message={e.message}")

        return self.engine.filter_applicable(records, build_cart(cart.items))

    async def apply_coupon(self, coupon_id: int, cart: CartRequest) -> AppliedCart:
        """Guard, apply and count one use of a coupon.

        Raises:
            HTTPException: 404 when the coupon does not exist
            CouponError: When the coupon is not eligible or its type is unsupported
        """
        coupon = await self.get_coupon(coupon_id)
        record = to_coupon_record(coupon)

        result = self.engine.apply_coupon(record, build_cart(cart.items))

        self.repository.increment_usage(coupon_id)
        return result
