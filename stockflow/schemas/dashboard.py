"""Dashboard schemas."""
from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Counts shown on the admin dashboard."""
    total_stock_items: int
    pending_requests: int
    low_stock_items: int
    total_users: int
