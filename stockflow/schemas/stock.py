"""Stock schemas for request/response validation."""
from datetime import datetime
import enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from stockflow.schemas.user import UserSummary


class AdjustmentType(str, enum.Enum):
    """Change types an admin may apply by hand."""
    ADDED = "added"
    REMOVED = "removed"


class StockBase(BaseModel):
    """Base stock schema."""
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)


class StockCreate(StockBase):
    """Schema for creating a stock item."""
    quantity: int = Field(0, ge=0)


class StockUpdate(BaseModel):
    """Schema for updating a stock item. Quantity changes go through adjustments."""
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)

    class Config:
        extra = "forbid"


class StockResponse(StockBase):
    """Schema for stock response."""
    id: str
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StockSummary(BaseModel):
    """Minimal stock info embedded in request listings."""
    id: str
    code: str
    name: str
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class QuantityAdjustment(BaseModel):
    """Schema for a manual quantity adjustment."""
    change_type: AdjustmentType
    quantity: int = Field(..., gt=0)
    comment: str = Field(..., min_length=1)

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment is required for quantity adjustment")
        return value


class StockHistoryResponse(BaseModel):
    """Schema for stock history response."""
    id: str
    stock_id: str
    change_type: str
    quantity: int
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True
