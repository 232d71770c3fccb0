"""
Cart Routes
=============
JSON API over the Reservation Engine. Every mutation returns the refreshed cart.

Endpoints:
  GET    /api/cart                    Cart items + totals
  POST   /api/cart/items              Add product (merges into existing row)
  PATCH  /api/cart/items/{item_id}    Set quantity (<= 0 removes)
  DELETE /api/cart/items/{item_id}    Remove item, stock returned
  DELETE /api/cart                    Clear cart, stock returned
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, StrictInt
from sqlalchemy.orm import Session

from config.database import get_db
from modules.auth.deps import require_user
from modules.cart.reservation_service import reservation_engine

router = APIRouter(prefix="/api/cart", tags=["cart"])


# ==========================================
# Schemas
# ==========================================

class AddItemRequest(BaseModel):
    product_id: int
    quantity: StrictInt = Field(1, gt=0)


class UpdateItemRequest(BaseModel):
    quantity: StrictInt


# ==========================================
# 🛒 View Cart
# ==========================================

@router.get("")
async def view_cart(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    return reservation_engine.get_cart(db, user_id)


# ==========================================
# ➕ Add
# ==========================================

@router.post("/items")
async def add_item(
    body: AddItemRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    item = reservation_engine.add_to_cart(db, user_id, body.product_id, body.quantity)
    return {
        "status": "success",
        "item_id": item.id,
        "new_quantity": item.quantity,
        "cart": reservation_engine.get_cart(db, user_id),
    }


# ==========================================
# ✏️ Update quantity
# ==========================================

@router.patch("/items/{item_id}")
async def update_item(
    item_id: int,
    body: UpdateItemRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    item = reservation_engine.update_quantity(db, user_id, item_id, body.quantity)
    return {
        "status": "success",
        "item_id": item_id,
        "new_quantity": item.quantity if item else 0,
        "cart": reservation_engine.get_cart(db, user_id),
    }


# ==========================================
# ❌ Remove / Clear
# ==========================================

@router.delete("/items/{item_id}")
async def remove_item(
    item_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    released = reservation_engine.remove_from_cart(db, user_id, item_id)
    return {
        "status": "success",
        "released": released,
        "cart": reservation_engine.get_cart(db, user_id),
    }


@router.delete("")
async def clear_cart(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    released = reservation_engine.clear_cart(db, user_id)
    return {
        "status": "success",
        "released": released,
        "cart": reservation_engine.get_cart(db, user_id),
    }
