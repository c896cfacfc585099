from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

# Database
from coupon_service.connections.database import get_db

# Core functions
from coupon_service.core.coupon_functions import (
    create_coupon_core,
    list_coupons_core,
    get_coupon_core,
    update_coupon_core,
    delete_coupon_core,
    get_applicable_coupons_core,
    apply_coupon_core,
)

# DTOs
from coupon_service.dto.cart import CartRequest, ApplicableCouponsResponse, ApplyCouponResponse
from coupon_service.dto.coupons import CreateCouponRequest, UpdateCouponRequest, CouponResponse

coupons_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupons_router.post("", response_model=CouponResponse, status_code=status.HTTP_201_CREATED)
async def create_coupon(request: CreateCouponRequest, db: Session = Depends(get_db)):
    """ Create a coupon; details are validated against the coupon type """
    return await create_coupon_core(request, db)


@coupons_router.get("", response_model=List[CouponResponse])
async def list_coupons(db: Session = Depends(get_db)):
    return await list_coupons_core(db)


@coupons_router.post("/applicable-coupons", response_model=ApplicableCouponsResponse)
async def get_applicable_coupons(cart: CartRequest, db: Session = Depends(get_db)):
    """ List active coupons that give a positive discount on the cart """
    return await get_applicable_coupons_core(cart, db)


@coupons_router.post("/apply-coupon/{coupon_id}", response_model=ApplyCouponResponse)
async def apply_coupon(coupon_id: int, cart: CartRequest, db: Session = Depends(get_db)):
    """ Apply a coupon to the cart and return per-item discounts """
    return await apply_coupon_core(coupon_id, cart, db)


@coupons_router.get("/{coupon_id}", response_model=CouponResponse)
async def get_coupon(coupon_id: int, db: Session = Depends(get_db)):
    return await get_coupon_core(coupon_id, db)


@coupons_router.patch("/{coupon_id}", response_model=CouponResponse)
async def update_coupon(coupon_id: int, request: UpdateCouponRequest, db: Session = Depends(get_db)):
    """ Partially update a coupon """
    return await update_coupon_core(coupon_id, request, db)


@coupons_router.delete("/{coupon_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_coupon(coupon_id: int, db: Session = Depends(get_db)):
    await delete_coupon_core(coupon_id, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
