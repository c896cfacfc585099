from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

# Models
from coupon_service.models.coupons import Coupon

# Rules
from coupon_service.coupons.rules import CouponRecord, rule_from_details

from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("coupons.repository")


def _normalize_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def to_coupon_record(coupon: Coupon) -> CouponRecord:
    """Build the engine view of a stored coupon.

    Raises:
        UnsupportedRuleKind: If the stored type is not a known coupon kind
        InvalidCouponRule: If the stored details do not fit the type
    """
    return CouponRecord(
        id=coupon.id,
        rule=rule_from_details(coupon.type, coupon.details),
        is_active=bool(coupon.is_active),
        expires_at=coupon.expires_at,
        usage_count=coupon.usage_count or 0,
        max_usage=coupon.max_usage,
        min_cart_value=coupon.min_cart_value,
        max_discount=coupon.max_discount,
        description=coupon.description,
        code=coupon.code,
    )


class CouponsRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, values: Dict) -> Coupon:
        try:
            values = dict(values)
            values["expires_at"] = _normalize_timestamp(values.get("expires_at"))
            coupon = Coupon(**values)
            self.db.add(coupon)
            self.db.commit()
            self.db.refresh(coupon)
            logger.info(f"coupon_created | coupon_id={coupon.id} type={coupon.type} code={coupon.code}")
            return coupon
        except Exception as e:
            self.db.rollback()
            logger.error(f"coupon_create_error | type={values.get('type')} error={e}", exc_info=True)
            raise

    def list_all(self) -> List[Coupon]:
        stmt = select(Coupon).order_by(Coupon.created_at.desc(), Coupon.id.desc())
        return list(self.db.scalars(stmt))

    def list_active(self) -> List[Coupon]:
        stmt = select(Coupon).where(Coupon.is_active.is_(True)).order_by(Coupon.id)
        coupons = list(self.db.scalars(stmt))
        logger.info(f"list_active_coupons | count={len(coupons)}")
        return coupons

    def get(self, coupon_id: int) -> Optional[Coupon]:
        return self.db.get(Coupon, coupon_id)

    def update(self, coupon: Coupon, values: Dict) -> Coupon:
        try:
            for key, value in values.items():
                if key == "expires_at":
                    value = _normalize_timestamp(value)
                setattr(coupon, key, value)
            self.db.commit()
            self.db.refresh(coupon)
            logger.info(f"coupon_updated | coupon_id={coupon.id} fields={sorted(values)}")
            return coupon
        except Exception as e:
            self.db.rollback()
            logger.error(f"coupon_update_error | coupon_id={coupon.id} error={e}", exc_info=True)
            raise

    def delete(self, coupon: Coupon) -> None:
        try:
            coupon_id = coupon.id
            self.db.delete(coupon)
            self.db.commit()
            logger.info(f"coupon_deleted | coupon_id={coupon_id}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"coupon_delete_error | coupon_id={coupon.id} error={e}", exc_info=True)
            raise

    def increment_usage(self, coupon_id: int) -> None:
        # Single UPDATE so concurrent increments are not lost; limit checks are not re-run here
        try:
            stmt = update(Coupon).where(Coupon.id == coupon_id).values(usage_count=Coupon.usage_count + 1)
            self.db.execute(stmt)
            self.db.commit()
            logger.info(f"coupon_usage_incremented | coupon_id={coupon_id}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"coupon_usage_increment_error | coupon_id={coupon_id} error={e}", exc_info=True)
            raise
