"""Admin dashboard routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stockflow.auth import require_admin
from stockflow.database import get_db
from stockflow.models.user import User
from stockflow.schemas.dashboard import DashboardStats
from stockflow.services.dashboard import get_dashboard_stats

router = APIRouter(prefix="/admin/dashboard", tags=["Admin: Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Stock, request and user counts for the dashboard."""
    return get_dashboard_stats(db)
