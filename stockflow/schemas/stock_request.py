"""Stock request schemas for request/response validation."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from stockflow.models.stock_request import RequestStatus
from stockflow.schemas.stock import StockSummary
from stockflow.schemas.user import UserSummary


class StockRequestCreate(BaseModel):
    """Schema for creating a stock request."""
    stock_id: str
    quantity: int = Field(..., gt=0)
    reason: Optional[str] = None


class RequestDecision(BaseModel):
    """Body of an approve or deny call."""
    admin_notes: Optional[str] = None


class StockRequestResponse(BaseModel):
    """Schema for stock request response."""
    id: str
    user_id: str
    stock_id: str
    quantity: int
    reason: Optional[str] = None
    status: RequestStatus
    admin_notes: Optional[str] = None
    approved_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StockRequestDetail(StockRequestResponse):
    """Stock request with requester and stock summaries."""
    user: Optional[UserSummary] = None
    stock: Optional[StockSummary] = None
