"""Stock request routes - user submissions and admin decisions."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from stockflow.auth import get_current_user, require_admin
from stockflow.database import get_db
from stockflow.models.stock_request import RequestStatus
from stockflow.models.user import User
from stockflow.schemas.stock_request import (
    RequestDecision,
    StockRequestCreate,
    StockRequestDetail,
    StockRequestResponse,
)
from stockflow.services import stock_requests as request_service

router = APIRouter(prefix="/requests", tags=["Requests"])
admin_router = APIRouter(prefix="/admin/requests", tags=["Admin: Requests"])


@router.post("/", response_model=StockRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    request_data: StockRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Request units of a stock item."""
    return request_service.create_stock_request(
        db,
        user_id=current_user.id,
        stock_id=request_data.stock_id,
        quantity=request_data.quantity,
        reason=request_data.reason,
    )


@router.get("/user", response_model=List[StockRequestDetail])
async def list_my_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List the signed-in user's requests."""
    return request_service.list_requests_for_user(db, current_user.id)


@admin_router.get("/", response_model=List[StockRequestDetail])
async def list_requests(
    status: Optional[RequestStatus] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """List all requests (admin only)."""
    return request_service.list_requests(db, status=status)


@admin_router.put("/{request_id}/approve", response_model=StockRequestResponse)
async def approve_request(
    request_id: str,
    decision: Optional[RequestDecision] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Approve a pending request and allocate the stock (admin only)."""
    return request_service.approve_request(
        db, request_id, current_user.id,
        admin_notes=decision.admin_notes if decision else None,
    )


@admin_router.put("/{request_id}/deny", response_model=StockRequestResponse)
async def deny_request(
    request_id: str,
    decision: Optional[RequestDecision] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Deny a pending request (admin only)."""
    return request_service.deny_request(
        db, request_id, current_user.id,
        admin_notes=decision.admin_notes if decision else None,
    )
