#!/usr/bin/env python3
"""
Script to insert sample coupons into an empty coupons table.
Run from the application directory: python seed_sample_data.py
"""
import sys
from datetime import datetime, timezone

from sqlalchemy import func, select

from coupon_service.connections.database import create_tables, get_db_session
from coupon_service.core.constants import CouponType
from coupon_service.dto.coupons import CreateCouponRequest
from coupon_service.models.coupons import Coupon
from coupon_service.repository.coupons import CouponsRepository

SAMPLE_COUPONS = [
    # Cart-wise coupons
    {
        "type": CouponType.CART_WISE,
        "details": {"threshold": 100, "discount": 10},
        "description": "10% off on orders over $100",
        "code": "SAVE10",
        "max_discount": 50,
    },
    {
        "type": CouponType.CART_WISE,
        "details": {"threshold": 200, "discount": 15},
        "description": "15% off on orders over $200",
        "code": "SAVE15",
        "max_discount": 100,
    },
    # Product-wise coupons
    {
        "type": CouponType.PRODUCT_WISE,
        "details": {"product_id": 1, "discount": 20},
        "description": "20% off on Product 1",
        "code": "PROD1_20",
    },
    {
        "type": CouponType.PRODUCT_WISE,
        "details": {"product_id": 2, "discount": 25},
        "description": "25% off on Product 2",
        "code": "PROD2_25",
    },
    # BxGy coupons
    {
        "type": CouponType.BXGY,
        "details": {
            "buy_products": [{"product_id": 1, "quantity": 3}, {"product_id": 2, "quantity": 3}],
            "get_products": [{"product_id": 3, "quantity": 1}],
            "repetition_limit": 2,
        },
        "description": "Buy 3 of Product 1 or 2, get 1 of Product 3 free",
        "code": "B2G1",
    },
    {
        "type": CouponType.BXGY,
        "details": {
            "buy_products": [{"product_id": 1, "quantity": 2}],
            "get_products": [{"product_id": 2, "quantity": 1}],
            "repetition_limit": 3,
        },
        "description": "Buy 2 of Product 1, get 1 of Product 2 free",
        "code": "B2G1_SIMPLE",
    },
    # Expired coupon
    {
        "type": CouponType.CART_WISE,
        "details": {"threshold": 50, "discount": 5},
        "description": "Expired coupon - 5% off on orders over $50",
        "code": "EXPIRED",
        "expires_at": datetime(2020, 1, 1, tzinfo=timezone.utc),
    },
    # Usage limited coupon, two uses left
    {
        "type": CouponType.PRODUCT_WISE,
        "details": {"product_id": 3, "discount": 30},
        "description": "30% off on Product 3 (limited usage)",
        "code": "LIMITED",
        "max_usage": 5,
        "usage_count": 3,
    },
    {
        "type": CouponType.CART_WISE,
        "details": {"threshold": 150, "discount": 12},
        "description": "Inactive coupon - 12% off on orders over $150",
        "code": "INACTIVE",
        "is_active": False,
    },
]


def seed(db) -> int:
    """Insert the sample coupons unless the table already has rows; returns the number inserted"""
    existing = db.scalar(select(func.count()).select_from(Coupon))
    if existing:
        print(f"Sample data already exists ({existing} coupons), skipping seeding")
        return 0

    repository = CouponsRepository(db)
    for data in SAMPLE_COUPONS:
        data = dict(data)
        usage_count = data.pop("usage_count", 0)
        values = CreateCouponRequest(**data).model_dump()
        values["usage_count"] = usage_count
        repository.create(values)

    print(f"Seeded {len(SAMPLE_COUPONS)} sample coupons")
    return len(SAMPLE_COUPONS)


if __name__ == "__main__":
    try:
        create_tables()
        with get_db_session() as db:
            seed(db)
    except Exception as e:
        print(f"ERROR: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
