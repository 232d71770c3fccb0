"""
Cart Module - Reservation Engine
==================================
Moves quantity between a product's unreserved stock and users' carts.

Each operation is one transaction: product rows are locked (FOR UPDATE, in
ascending id order), stock changes are conditional UPDATEs, and cart rows are
version-checked. If a concurrent writer wins, the transaction is rolled back
and the whole operation re-run against fresh state, up to
RESERVATION_MAX_RETRIES times.

Invariant: stock_quantity + sum(cart quantities) per product is unchanged by
every operation here, successful or not.

Usage:
    item = reservation_engine.add_to_cart(db, user_id, product_id=7, quantity=2)
    reservation_engine.update_quantity(db, user_id, item.id, 1)
    reservation_engine.clear_cart(db, user_id)
"""

import logging
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from config.settings import RESERVATION_MAX_RETRIES
from common.exceptions import (
    EmartError, NotFoundError, UnauthenticatedError, StorageConflictError,
)
from common.helpers import require_quantity, to_money
from modules.cart.models import CartItem
from modules.cart.service import CartStore, cart_store
from modules.inventory.service import InventoryLedger, inventory_ledger

logger = logging.getLogger("emart.cart")

T = TypeVar("T")

# PostgreSQL serialization_failure / deadlock_detected
_RETRYABLE_PGCODES = {"40001", "40P01"}


def is_conflict(exc: Exception) -> bool:
    """True when a storage error means "lost a race", not "broken"."""
    if isinstance(exc, (IntegrityError, StaleDataError)):
        return True
    if isinstance(exc, OperationalError):
        if getattr(exc.orig, "pgcode", None) in _RETRYABLE_PGCODES:
            return True
        return "database is locked" in str(exc.orig).lower()
    return False


class ReservationEngine:
    """Stateless engine: every call receives the session and the user id."""

    def __init__(
        self,
        ledger: InventoryLedger = inventory_ledger,
        store: CartStore = cart_store,
        max_retries: int = RESERVATION_MAX_RETRIES,
    ):
        self.ledger = ledger
        self.store = store
        self.max_retries = max(1, max_retries)

    # ==========================================
    # Transaction runner
    # ==========================================

    def _transaction(self, db: Session, operation: str, work: Callable[[], T]) -> T:
        """Run `work` and commit; roll back on any failure, retry on conflicts."""
        last_error = None
        for attempt in range(1, self.max_retries + 1):
            try:
                result = work()
                db.commit()
                return result
            except EmartError:
                db.rollback()
                raise
            except (IntegrityError, StaleDataError, OperationalError) as e:
                db.rollback()
                if not is_conflict(e):
                    raise
                last_error = e
                logger.warning(
                    f"{operation}: concurrent modification "
                    f"(attempt {attempt}/{self.max_retries}): {type(e).__name__}"
                )
            except Exception:
                db.rollback()
                raise

        logger.error(f"{operation}: giving up after {self.max_retries} attempts")
        raise StorageConflictError() from last_error

    def _require_user(self, user_id) -> str:
        if user_id is None or not str(user_id).strip():
            raise UnauthenticatedError()
        return str(user_id)

    def _owned_item(self, db: Session, user_id: str, item_id: int, lock: bool = False) -> CartItem:
        item = self.store.get_item_by_id(db, item_id, lock=lock)
        if not item or item.user_id != user_id:
            raise NotFoundError(f"Cart item {item_id} not found.")
        return item

    # ==========================================
    # Mutations
    # ==========================================

    def add_to_cart(self, db: Session, user_id, product_id: int, quantity: int = 1) -> CartItem:
        """
        Reserve `quantity` more units of a product for the user.
        Merges into the existing row; fails with InsufficientStockError
        when stock < quantity.
        """
        user_id = self._require_user(user_id)
        require_quantity(quantity)

        def work():
            product = self.ledger.lock_product(db, product_id)
            item = self.store.get_item(db, user_id, product.id, lock=True)
            new_qty = (item.quantity if item else 0) + quantity
            self.ledger.adjust_stock(db, product.id, -quantity)
            return self.store.upsert_item(db, user_id, product.id, new_qty, existing=item)

        item = self._transaction(db, "add_to_cart", work)
        logger.info(f"User {user_id} reserved {quantity} x product #{product_id} (cart qty {item.quantity})")
        return item

    def update_quantity(self, db: Session, user_id, item_id: int, quantity: int) -> Optional[CartItem]:
        """
        Set a cart item's quantity, moving the difference to or from stock.
        quantity <= 0 removes the item and returns None.
        """
        user_id = self._require_user(user_id)
        require_quantity(quantity, allow_zero_or_less=True)
        if quantity <= 0:
            self.remove_from_cart(db, user_id, item_id)
            return None

        def work():
            product_id = self._owned_item(db, user_id, item_id).product_id
            self.ledger.lock_product(db, product_id)
            item = self._owned_item(db, user_id, item_id, lock=True)
            delta = quantity - item.quantity
            if delta:
                self.ledger.adjust_stock(db, product_id, -delta)
                self.store.upsert_item(db, user_id, product_id, quantity, existing=item)
            return item

        item = self._transaction(db, "update_quantity", work)
        logger.info(f"User {user_id} set cart item #{item_id} to {quantity}")
        return item

    def remove_from_cart(self, db: Session, user_id, item_id: int) -> int:
        """Return the item's quantity to stock and delete it. Returns units released."""
        user_id = self._require_user(user_id)

        def work():
            product_id = self._owned_item(db, user_id, item_id).product_id
            self.ledger.lock_product(db, product_id)
            item = self._owned_item(db, user_id, item_id, lock=True)
            released = item.quantity
            self.ledger.adjust_stock(db, product_id, released)
            self.store.delete_item(db, item)
            return released

        released = self._transaction(db, "remove_from_cart", work)
        logger.info(f"User {user_id} removed cart item #{item_id} ({released} units released)")
        return released

    def clear_cart(self, db: Session, user_id) -> int:
        """
        Return every item's quantity to stock and delete all of the user's
        cart rows, all-or-nothing. Returns the total units released.
        """
        user_id = self._require_user(user_id)

        def work():
            product_ids = [it.product_id for it in self.store.list_items(db, user_id)]
            if not product_ids:
                return 0
            self.ledger.lock_products(db, product_ids)
            released = 0
            for item in self.store.list_items(db, user_id, lock=True):
                self.ledger.adjust_stock(db, item.product_id, item.quantity)
                released += item.quantity
                self.store.delete_item(db, item)
            return released

        released = self._transaction(db, "clear_cart", work)
        if released:
            logger.info(f"User {user_id} cleared cart ({released} units released)")
        return released

    # ==========================================
    # Read side
    # ==========================================

    def get_total_items(self, db: Session, user_id) -> int:
        user_id = self._require_user(user_id)
        return sum(item.quantity for item in self.store.list_items(db, user_id))

    def get_total_price(self, db: Session, user_id) -> Decimal:
        user_id = self._require_user(user_id)
        total = sum(
            (item.product.price * item.quantity for item in self.store.list_items(db, user_id)),
            Decimal("0"),
        )
        return to_money(total)

    def get_cart(self, db: Session, user_id) -> dict:
        """Cart snapshot for the API: items with product data and totals."""
        user_id = self._require_user(user_id)
        items = self.store.list_items(db, user_id)
        total_price = sum((item.product.price * item.quantity for item in items), Decimal("0"))
        return {
            "items": [item.to_dict() for item in items],
            "total_items": sum(item.quantity for item in items),
            "total_price": str(to_money(total_price)),
        }


# Singleton
reservation_engine = ReservationEngine()
