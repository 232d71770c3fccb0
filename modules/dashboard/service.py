"""
Dashboard Service
===================
Per-user overview: catalog size, own order count and spend, recent orders.
"""

from typing import Any, Dict

from sqlalchemy.orm import Session

from config.settings import RECENT_ORDERS_LIMIT
from modules.catalog.service import catalog_service
from modules.order.service import order_service


class DashboardService:

    def get_user_dashboard(self, db: Session, user_id: str) -> Dict[str, Any]:
        recent = order_service.get_user_orders(db, user_id, limit=RECENT_ORDERS_LIMIT)
        return {
            "total_products": catalog_service.count_products(db),
            "total_orders": order_service.count_user_orders(db, user_id),
            "total_spent": str(order_service.get_total_spent(db, user_id)),
            "recent_orders": [o.to_dict() for o in recent],
        }


dashboard_service = DashboardService()
