"""
Catalog Module - Service Layer
================================
Product listing with search, filters and sorting; categories with counts.
Stock is never written here (see modules.inventory.service).
"""

import math
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy import func, desc, asc, or_

from config.settings import BEST_SELLERS_LIMIT, PRODUCTS_PER_PAGE
from common.exceptions import NotFoundError, InvalidArgumentError
from common.helpers import to_money
from modules.catalog.models import Category, Product

SORT_OPTIONS = {
    "name": (asc(Product.name), asc(Product.id)),
    "price_asc": (asc(Product.price), asc(Product.id)),
    "price_desc": (desc(Product.price), asc(Product.id)),
    "newest": (desc(Product.created_at), desc(Product.id)),
}


class CatalogService:

    # ==========================================
    # Products
    # ==========================================

    def list_products(
        self,
        db: Session,
        search: str = None,
        category_id: int = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        sort: str = "name",
        page: int = 1,
        per_page: int = PRODUCTS_PER_PAGE,
    ) -> Tuple[List[Product], int]:
        """
        List products with optional filters.
        Search matches name or description, case-insensitively.
        Returns: (products, total_count)
        """
        if sort not in SORT_OPTIONS:
            raise InvalidArgumentError(f"Unknown sort option: {sort}")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise InvalidArgumentError("min_price must not exceed max_price.")
        if page < 1 or per_page < 1:
            raise InvalidArgumentError("page and per_page must be positive.")

        query = db.query(Product)

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
            ))
        if category_id:
            query = query.filter(Product.category_id == category_id)
        if min_price is not None:
            query = query.filter(Product.price >= min_price)
        if max_price is not None:
            query = query.filter(Product.price <= max_price)

        total = query.count()
        products = (
            query.order_by(*SORT_OPTIONS[sort])
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return products, total

    def total_pages(self, total: int, per_page: int = PRODUCTS_PER_PAGE) -> int:
        return math.ceil(total / per_page) if total else 1

    def get_product(self, db: Session, product_id: int) -> Product:
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise NotFoundError(f"Product {product_id} not found.")
        return product

    def get_best_sellers(self, db: Session, limit: int = BEST_SELLERS_LIMIT) -> List[Product]:
        return db.query(Product).order_by(Product.id).limit(limit).all()

    def count_products(self, db: Session) -> int:
        return db.query(func.count(Product.id)).scalar() or 0

    # ==========================================
    # Categories
    # ==========================================

    def list_categories_with_counts(self, db: Session) -> List[dict]:
        """All categories with the number of products in each (single grouped query)."""
        rows = (
            db.query(Category, func.count(Product.id))
            .outerjoin(Product, Product.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name)
            .all()
        )
        return [
            {
                "id": category.id,
                "name": category.name,
                "description": category.description,
                "product_count": count,
            }
            for category, count in rows
        ]

    # ==========================================
    # Management (seeding, tests)
    # ==========================================

    def create_category(self, db: Session, name: str, description: str = None) -> Category:
        category = Category(name=name.strip(), description=description)
        db.add(category)
        db.flush()
        return category

    def create_product(
        self,
        db: Session,
        name: str,
        sku: str,
        price,
        stock_quantity: int = 0,
        category_id: int = None,
        description: str = None,
        image_url: str = None,
    ) -> Product:
        """Create a product with its initial stock. Flushes, caller commits."""
        price = to_money(price)
        if price < 0:
            raise InvalidArgumentError("Price must not be negative.")
        if stock_quantity < 0:
            raise InvalidArgumentError("Initial stock must not be negative.")
        product = Product(
            name=name.strip(),
            sku=sku.strip(),
            price=price,
            stock_quantity=stock_quantity,
            category_id=category_id,
            description=description,
            image_url=image_url,
        )
        db.add(product)
        db.flush()
        return product


# Singleton
catalog_service = CatalogService()
