"""Admin dashboard counts."""
from sqlalchemy import func
from sqlalchemy.orm import Session

from stockflow.models.stock import Stock
from stockflow.models.stock_request import RequestStatus, StockRequest
from stockflow.models.user import User

# Items at or below this quantity count as low stock
LOW_STOCK_THRESHOLD = 5


def get_dashboard_stats(db: Session) -> dict:
    total_stock_items = db.query(func.count(Stock.id)).scalar()
    pending_requests = (
        db.query(func.count(StockRequest.id))
        .filter(StockRequest.status == RequestStatus.PENDING.value)
        .scalar()
    )
    low_stock_items = (
        db.query(func.count(Stock.id))
        .filter(Stock.quantity <= LOW_STOCK_THRESHOLD)
        .scalar()
    )
    total_users = db.query(func.count(User.id)).scalar()

    return {
        "total_stock_items": total_stock_items,
        "pending_requests": pending_requests,
        "low_stock_items": low_stock_items,
        "total_users": total_users,
    }
