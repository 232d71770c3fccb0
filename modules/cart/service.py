"""
Cart Module - Store
=====================
Storage for cart rows. No stock logic and no commits: the Reservation Engine
calls these inside its own transaction.
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from modules.cart.models import CartItem


class CartStore:

    def get_item(
        self, db: Session, user_id: str, product_id: int, lock: bool = False,
    ) -> Optional[CartItem]:
        """The user's row for a product, if any."""
        query = db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
        ).populate_existing()
        if lock:
            query = query.with_for_update()
        return query.first()

    def get_item_by_id(self, db: Session, item_id: int, lock: bool = False) -> Optional[CartItem]:
        query = db.query(CartItem).filter(CartItem.id == item_id).populate_existing()
        if lock:
            query = query.with_for_update()
        return query.first()

    def upsert_item(
        self,
        db: Session,
        user_id: str,
        product_id: int,
        quantity: int,
        existing: Optional[CartItem] = None,
    ) -> CartItem:
        """
        Set the quantity of the (user, product) row.

        `existing` is the row the caller read in this transaction (None when
        it saw no row). The write is checked against that read: the UPDATE
        carries its version, and an INSERT of a pair that appeared meanwhile
        fails on uq_cart_user_product. Both surface here at flush.
        """
        if existing is not None:
            existing.quantity = quantity
            item = existing
        else:
            item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            db.add(item)
        db.flush()
        return item

    def delete_item(self, db: Session, item: CartItem):
        db.delete(item)
        db.flush()

    def list_items(self, db: Session, user_id: str, lock: bool = False) -> List[CartItem]:
        query = (
            db.query(CartItem)
            .options(joinedload(CartItem.product))
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.id)
            .populate_existing()
        )
        if lock:
            # FOR UPDATE OF cart_items only; joined product rows are locked separately
            query = query.with_for_update(of=CartItem)
        return query.all()


# Singleton
cart_store = CartStore()
