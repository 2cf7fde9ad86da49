"""Stock routes - public catalog and admin stock management."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from stockflow.auth import require_admin
from stockflow.database import get_db
from stockflow.models.user import User
from stockflow.schemas.stock import (
    QuantityAdjustment,
    StockCreate,
    StockHistoryResponse,
    StockResponse,
    StockUpdate,
)
from stockflow.schemas.stock_request import StockRequestDetail
from stockflow.services import stock_requests as request_service
from stockflow.services import stocks as stock_service

router = APIRouter(prefix="/stocks", tags=["Stocks"])
admin_router = APIRouter(prefix="/admin/stocks", tags=["Admin: Stocks"])


# ============================================================================
# Public catalog
# ============================================================================

@router.get("/", response_model=List[StockResponse])
async def list_stocks(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    search: Optional[str] = Query(None, description="Search by name or code"),
    category: Optional[str] = Query(None, description="Filter by category"),
    db: Session = Depends(get_db)
):
    """List stock items, newest first."""
    return stock_service.list_stocks(db, search=search, category=category, skip=skip, limit=limit)


@router.get("/categories", response_model=List[str])
async def list_categories(db: Session = Depends(get_db)):
    """List the distinct stock categories."""
    return stock_service.list_categories(db)


@router.get("/{stock_id}", response_model=StockResponse)
async def get_stock(stock_id: str, db: Session = Depends(get_db)):
    """Get a specific stock item."""
    return stock_service.get_stock(db, stock_id)


# ============================================================================
# Administration
# ============================================================================

@admin_router.post("/", response_model=StockResponse, status_code=status.HTTP_201_CREATED)
async def create_stock(
    stock_data: StockCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a new stock item (admin only)."""
    return stock_service.create_stock(db, stock_data, actor_id=current_user.id)


@admin_router.put("/{stock_id}", response_model=StockResponse)
async def update_stock(
    stock_id: str,
    stock_update: StockUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update a stock item's details (admin only)."""
    return stock_service.update_stock(db, stock_id, stock_update)


@admin_router.delete("/{stock_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stock(
    stock_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a stock item (admin only)."""
    stock_service.delete_stock(db, stock_id)
    return None


@admin_router.patch("/{stock_id}/adjust-quantity", response_model=StockResponse)
async def adjust_quantity(
    stock_id: str,
    adjustment: QuantityAdjustment,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Add or remove units with a mandatory comment (admin only)."""
    return stock_service.adjust_stock_quantity(
        db,
        stock_id,
        adjustment.change_type,
        adjustment.quantity,
        adjustment.comment,
        actor_id=current_user.id,
    )


@admin_router.get("/{stock_id}/history", response_model=List[StockHistoryResponse])
async def get_stock_history(
    stock_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Get the quantity history of a stock item."""
    return stock_service.get_stock_history(db, stock_id)


@admin_router.get("/{stock_id}/requests", response_model=List[StockRequestDetail])
async def get_stock_requests(
    stock_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Get all requests made against a stock item."""
    return request_service.list_requests_for_stock(db, stock_id)
