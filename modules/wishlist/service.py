"""
Wishlist Module - Service Layer
=================================
Save / remove products, and move a saved product into the cart.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from common.exceptions import NotFoundError, DuplicateError
from modules.catalog.service import catalog_service
from modules.cart.models import CartItem
from modules.cart.reservation_service import reservation_engine
from modules.wishlist.models import WishlistItem

logger = logging.getLogger("emart.wishlist")


class WishlistService:

    def list_items(self, db: Session, user_id: str) -> List[WishlistItem]:
        return (
            db.query(WishlistItem)
            .options(joinedload(WishlistItem.product))
            .filter(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
            .all()
        )

    def add_item(self, db: Session, user_id: str, product_id: int) -> WishlistItem:
        product = catalog_service.get_product(db, product_id)

        existing = db.query(WishlistItem).filter(
            WishlistItem.user_id == user_id,
            WishlistItem.product_id == product.id,
        ).first()
        if existing:
            raise DuplicateError(f"{product.name} is already in your wishlist.")

        item = WishlistItem(user_id=user_id, product_id=product.id)
        db.add(item)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise DuplicateError(f"{product.name} is already in your wishlist.")
        return item

    def remove_item(self, db: Session, user_id: str, item_id: int):
        item = self._owned_item(db, user_id, item_id)
        db.delete(item)
        db.flush()

    def move_to_cart(self, db: Session, user_id: str, item_id: int) -> CartItem:
        """
        Reserve one unit through the Reservation Engine, then drop the wishlist
        entry. If the reservation fails the wishlist is left untouched.
        """
        product_id = self._owned_item(db, user_id, item_id).product_id
        cart_item = reservation_engine.add_to_cart(db, user_id, product_id, 1)

        item = db.query(WishlistItem).filter(WishlistItem.id == item_id).first()
        if item:
            db.delete(item)
            db.flush()
        logger.info(f"User {user_id} moved product #{product_id} from wishlist to cart")
        return cart_item

    def _owned_item(self, db: Session, user_id: str, item_id: int) -> WishlistItem:
        item = db.query(WishlistItem).filter(
            WishlistItem.id == item_id,
            WishlistItem.user_id == user_id,
        ).first()
        if not item:
            raise NotFoundError(f"Wishlist item {item_id} not found.")
        return item


# Singleton
wishlist_service = WishlistService()
