"""
Dashboard Routes
==================
GET /api/dashboard: overview stats for the signed-in user.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from modules.auth.deps import require_user
from modules.dashboard.service import dashboard_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
async def user_dashboard(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user),
):
    return dashboard_service.get_user_dashboard(db, user_id)
