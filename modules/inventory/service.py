"""
Inventory Module - Ledger
===========================
Authoritative unreserved stock per product (products.stock_quantity).

Every write is a single conditional UPDATE, so the count can never go below
zero even if two transactions race past an application-level check. The
ledger never commits: the Reservation Engine owns the transaction and is the
only caller allowed to adjust stock.
"""

import logging
from typing import Dict, Iterable

from sqlalchemy import update
from sqlalchemy.orm import Session

from common.exceptions import NotFoundError, InsufficientStockError
from modules.catalog.models import Product

logger = logging.getLogger("emart.inventory")


class InventoryLedger:

    # ==========================================
    # Read
    # ==========================================

    def get_stock(self, db: Session, product_id: int) -> int:
        stock = (
            db.query(Product.stock_quantity)
            .filter(Product.id == product_id)
            .scalar()
        )
        if stock is None:
            raise NotFoundError(f"Product {product_id} not found.")
        return stock

    # ==========================================
    # Locking
    # ==========================================

    def lock_product(self, db: Session, product_id: int) -> Product:
        """SELECT ... FOR UPDATE on one product row. Raises NotFoundError."""
        product = (
            db.query(Product)
            .filter(Product.id == product_id)
            .populate_existing()
            .with_for_update()
            .first()
        )
        if not product:
            raise NotFoundError(f"Product {product_id} not found.")
        return product

    def lock_products(self, db: Session, product_ids: Iterable[int]) -> Dict[int, Product]:
        """Lock several product rows in a stable order to avoid deadlocks."""
        locked = {}
        for pid in sorted(set(product_ids)):
            locked[pid] = self.lock_product(db, pid)
        return locked

    # ==========================================
    # Write
    # ==========================================

    def adjust_stock(self, db: Session, product_id: int, delta: int) -> int:
        """
        Apply `delta` to a product's stock and return the new quantity.

        Negative delta reserves stock, positive delta returns it. The guard
        `stock_quantity + delta >= 0` is part of the UPDATE itself.
        Raises NotFoundError / InsufficientStockError with no write performed.
        """
        if delta == 0:
            return self.get_stock(db, product_id)

        result = db.execute(
            update(Product)
            .where(
                Product.id == product_id,
                Product.stock_quantity + delta >= 0,
            )
            .values(stock_quantity=Product.stock_quantity + delta)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            product = db.query(Product).filter(Product.id == product_id).populate_existing().first()
            if not product:
                raise NotFoundError(f"Product {product_id} not found.")
            logger.info(
                f"Stock check failed for product #{product_id}: "
                f"requested {-delta}, available {product.stock_quantity}"
            )
            raise InsufficientStockError(product.name, requested=-delta, available=product.stock_quantity)

        # Reload so any Product instance already in the session sees the new count
        product = db.get(Product, product_id, populate_existing=True)
        return product.stock_quantity


# Singleton
inventory_ledger = InventoryLedger()
