"""
Catalog Module - Models
========================
Category and Product. Product.stock_quantity is the inventory ledger column.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Numeric,
    ForeignKey, DateTime, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


# ==========================================
# 🗂️ Category
# ==========================================

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category {self.name}>"


# ==========================================
# 📦 Product
# ==========================================

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    stock_quantity = Column(Integer, default=0, nullable=False)   # unreserved units
    sku = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    category = relationship("Category", back_populates="products")

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_product_stock"),
        CheckConstraint("price >= 0", name="ck_product_price"),
    )

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "image_url": self.image_url,
            "category_id": self.category_id,
            "stock_quantity": self.stock_quantity,
            "sku": self.sku,
            "in_stock": self.in_stock,
        }

    def __repr__(self):
        return f"<Product {self.sku} ({self.stock_quantity} in stock)>"
