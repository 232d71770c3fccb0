"""
Wishlist Module - Models
=========================
Products a user saved for later. No stock is held.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class WishlistItem(Base):
    __tablename__ = "wishlist_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product")

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product": {
                "id": self.product.id,
                "name": self.product.name,
                "price": str(self.product.price),
                "image_url": self.product.image_url,
                "stock_quantity": self.product.stock_quantity,
            },
        }
