from dataclasses import asdict
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

# Services
from coupon_service.services.coupon_service import CouponService

# Errors
from coupon_service.coupons.exceptions import CouponError
from coupon_service.core.constants import CouponErrorCode

# DTOs
from coupon_service.dto.cart import (
    CartRequest, ApplicableCouponsResponse, ApplicableCouponResponse, ApplyCouponResponse, UpdatedCart
)
from coupon_service.dto.coupons import CreateCouponRequest, UpdateCouponRequest, CouponResponse

# Context
from coupon_service.middlewares.request_context import request_context

# Logging
from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("coupons.core.coupon_functions")


def _internal_error(message: str) -> HTTPException:
    return HTTPException(status_code=500, detail={"error_code": CouponErrorCode.INTERNAL_ERROR, "message": message})


async def create_coupon_core(request: CreateCouponRequest, db: Session) -> CouponResponse:
    try:
        coupon = await CouponService(db).create_coupon(request)
        return CouponResponse.model_validate(coupon)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"create_coupon_core_error | type={request.type} error={e}", exc_info=True)
        raise _internal_error("Failed to create coupon")


async def list_coupons_core(db: Session) -> List[CouponResponse]:
    try:
        coupons = await CouponService(db).list_coupons()
        logger.info(f"list_coupons_core_response | count={len(coupons)}")
        return [CouponResponse.model_validate(coupon) for coupon in coupons]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"list_coupons_core_error | error={e}", exc_info=True)
        raise _internal_error("Failed to fetch coupons")


async def get_coupon_core(coupon_id: int, db: Session) -> CouponResponse:
    try:
        coupon = await CouponService(db).get_coupon(coupon_id)
        return CouponResponse.model_validate(coupon)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"get_coupon_core_error | coupon_id={coupon_id} error={e}", exc_info=True)
        raise _internal_error("Failed to fetch coupon")


async def update_coupon_core(coupon_id: int, request: UpdateCouponRequest, db: Session) -> CouponResponse:
    try:
        coupon = await CouponService(db).update_coupon(coupon_id, request)
        return CouponResponse.model_validate(coupon)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"update_coupon_core_error | coupon_id={coupon_id} error={e}", exc_info=True)
        raise _internal_error("Failed to update coupon")


async def delete_coupon_core(coupon_id: int, db: Session) -> None:
    try:
        await CouponService(db).delete_coupon(coupon_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"delete_coupon_core_error | coupon_id={coupon_id} error={e}", exc_info=True)
        raise _internal_error("Failed to delete coupon")


async def get_applicable_coupons_core(cart: CartRequest, db: Session) -> ApplicableCouponsResponse:
    """
    Core function to list the active coupons that give a discount on a cart

    Args:
        cart: CartRequest with the cart items
        db: Database session

    Returns:
        ApplicableCouponsResponse in the order the coupons are stored
    """
    try:
        request_context.cart_size = len(cart.items)
        applicable = await CouponService(db).get_applicable_coupons(cart)
        logger.info(f"get_applicable_coupons_core_response | items_count={len(cart.items)} count={len(applicable)}")
        return ApplicableCouponsResponse(
            applicable_coupons=[ApplicableCouponResponse(**asdict(coupon)) for coupon in applicable]
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"get_applicable_coupons_core_error | error={e}", exc_info=True)
        raise _internal_error("Failed to calculate applicable coupons")


async def apply_coupon_core(coupon_id: int, cart: CartRequest, db: Session) -> ApplyCouponResponse:
    """
    Core function to apply one coupon to a cart

    Eligibility failures and unsupported coupon types are reported as 400
    with the failure's error code; the coupon's usage count only grows when
    the application succeeds.

    Args:
        coupon_id: Coupon to apply
        cart: CartRequest with the cart items
        db: Database session

    Returns:
        ApplyCouponResponse with per-item discounts and totals
    """
    try:
        request_context.coupon_id = coupon_id
        request_context.cart_size = len(cart.items)
        result = await CouponService(db).apply_coupon(coupon_id, cart)
        logger.info(f"apply_coupon_core_response | coupon_id={coupon_id} total_price={result.total_price} total_discount={result.total_discount} final_price={result.final_price}")
        return ApplyCouponResponse(updated_cart=UpdatedCart.model_validate(result))
    except HTTPException:
        raise
    except CouponError as e:
        logger.warning(f"apply_coupon_core_rejected | coupon_id={coupon_id} error_code={e.error_code} message={e.message}")
        raise HTTPException(status_code=400, detail=e.to_detail())
    except Exception as e:
        logger.error(f"apply_coupon_core_error | coupon_id={coupon_id} error={e}", exc_info=True)
        raise _internal_error("Failed to apply coupon")
