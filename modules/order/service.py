"""
Order Module - Service Layer
===============================
Read-only order queries for the user dashboard.
"""

from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from common.helpers import to_money
from modules.order.models import Order


class OrderService:

    def get_user_orders(self, db: Session, user_id: str, limit: int = None) -> List[Order]:
        """User's orders, newest first."""
        query = db.query(Order).filter(
            Order.user_id == user_id,
        ).order_by(desc(Order.created_at), desc(Order.id))
        if limit:
            query = query.limit(limit)
        return query.all()

    def count_user_orders(self, db: Session, user_id: str) -> int:
        return db.query(func.count(Order.id)).filter(Order.user_id == user_id).scalar() or 0

    def get_total_spent(self, db: Session, user_id: str) -> Decimal:
        """Sum of order totals, computed in Decimal."""
        amounts = db.query(Order.total_amount).filter(Order.user_id == user_id).all()
        return to_money(sum((a for (a,) in amounts), Decimal("0")))


# Singleton
order_service = OrderService()
