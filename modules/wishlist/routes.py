"""
Wishlist Routes
=================
  GET    /api/wishlist                        Saved products
  POST   /api/wishlist                        Save a product
  DELETE /api/wishlist/{item_id}              Remove
  POST   /api/wishlist/{item_id}/move-to-cart Reserve 1 unit, drop from wishlist
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from config.database import get_db
from modules.auth.deps import require_user
from modules.wishlist.service import wishlist_service

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


class AddWishlistRequest(BaseModel):
    product_id: int


@router.get("")
async def list_wishlist(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    return {"items": [it.to_dict() for it in wishlist_service.list_items(db, user_id)]}


@router.post("")
async def add_to_wishlist(
    body: AddWishlistRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    item = wishlist_service.add_item(db, user_id, body.product_id)
    db.commit()
    return {"status": "success", "item_id": item.id}


@router.delete("/{item_id}")
async def remove_from_wishlist(
    item_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    wishlist_service.remove_item(db, user_id, item_id)
    db.commit()
    return {"status": "success"}


@router.post("/{item_id}/move-to-cart")
async def move_to_cart(
    item_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    cart_item = wishlist_service.move_to_cart(db, user_id, item_id)
    db.commit()
    return {"status": "success", "cart_item_id": cart_item.id, "new_quantity": cart_item.quantity}
