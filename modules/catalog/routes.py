"""
Catalog Routes
================
Public, read-only product and category browsing.

Endpoints:
  GET /api/products                 Search / filter / sort, paginated
  GET /api/products/best-sellers    Home page product strip
  GET /api/products/{product_id}    Product detail
  GET /api/categories               Categories with product counts
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import PRODUCTS_PER_PAGE
from modules.catalog.service import catalog_service

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/products")
async def list_products(
    q: str = "",
    category_id: Optional[int] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    sort: str = "name",
    page: int = Query(1, ge=1),
    per_page: int = Query(PRODUCTS_PER_PAGE, ge=1, le=100),
    db: Session = Depends(get_db),
):
    products, total = catalog_service.list_products(
        db,
        search=q,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
        per_page=per_page,
    )
    return {
        "products": [p.to_dict() for p in products],
        "total": total,
        "page": page,
        "total_pages": catalog_service.total_pages(total, per_page),
    }


@router.get("/products/best-sellers")
async def best_sellers(db: Session = Depends(get_db)):
    return {"products": [p.to_dict() for p in catalog_service.get_best_sellers(db)]}


@router.get("/products/{product_id}")
async def product_detail(product_id: int, db: Session = Depends(get_db)):
    return catalog_service.get_product(db, product_id).to_dict()


@router.get("/categories")
async def list_categories(db: Session = Depends(get_db)):
    return {"categories": catalog_service.list_categories_with_counts(db)}
