"""
Cart Module - Models
=====================
One row per (user, product) holding the quantity reserved in that user's cart.
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)   # identity provider subject
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Bumped on every UPDATE/DELETE; a stale writer matches zero rows
    version_id = Column(Integer, nullable=False)

    product = relationship("Product")

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_qty"),
    )
    __mapper_args__ = {"version_id_col": version_id}

    def to_dict(self) -> dict:
        unit_price = self.product.price
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "product": {
                "name": self.product.name,
                "price": str(unit_price),
                "image_url": self.product.image_url,
                "sku": self.product.sku,
            },
            "line_total": str(unit_price * self.quantity),
        }

    def __repr__(self):
        return f"<CartItem user={self.user_id} product={self.product_id} qty={self.quantity}>"
