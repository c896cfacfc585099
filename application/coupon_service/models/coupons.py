"""
Coupon Model
Stores coupon rules with their eligibility and display metadata
"""

from sqlalchemy import Column, Integer, String, Boolean, Text, DECIMAL, TIMESTAMP, JSON, Index, true
from coupon_service.models.common import CommonModel


class Coupon(CommonModel):
    """
    Coupon model - `details` holds the rule for the coupon `type`:
    cart-wise {threshold, discount}, product-wise {product_id, discount},
    bxgy {buy_products, get_products, repetition_limit, match_policy}
    """
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), nullable=False)
    details = Column(JSON, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    expires_at = Column(TIMESTAMP(timezone=True), nullable=True)
    usage_count = Column(Integer, nullable=False, default=0, server_default="0")
    max_usage = Column(Integer, nullable=True)
    min_cart_value = Column(DECIMAL(10, 2), nullable=True)
    max_discount = Column(DECIMAL(10, 2), nullable=True)
    description = Column(Text, nullable=True)
    code = Column(String(50), nullable=True)

    def __repr__(self):
        return f"<Coupon(id={self.id}, type='{self.type}', code='{self.code}', is_active={self.is_active})>"

    __table_args__ = (
        Index('idx_coupons_is_active', 'is_active'),
        Index('idx_coupons_code', 'code'),
        Index('idx_coupons_created', 'created_at'),
    )
