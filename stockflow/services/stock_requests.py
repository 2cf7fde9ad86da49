"""Stock requests and the approval workflow.

Approval touches three tables (the request, the stock item and its history).
Each operation here runs in a single transaction, and both the request claim
and the stock decrement are conditional updates, so two admins approving at
the same time can neither approve a request twice nor push a quantity below
zero.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from stockflow.database import transaction
from stockflow.exceptions import (
    InsufficientStockError,
    NotFoundError,
    RequestAlreadyProcessedError,
    ValidationError,
)
from stockflow.models.stock import ChangeType, Stock
from stockflow.models.stock_request import RequestStatus, StockRequest
from stockflow.services.stocks import get_stock, record_history

logger = logging.getLogger(__name__)


def get_request(db: Session, request_id: str) -> StockRequest:
    request = db.query(StockRequest).filter(StockRequest.id == request_id).first()
    if not request:
        raise NotFoundError("Request not found")
    return request


def create_stock_request(
    db: Session,
    user_id: str,
    stock_id: str,
    quantity: int,
    reason: Optional[str] = None
) -> StockRequest:
    """
    Create a pending request.

    Availability is checked here but nothing is reserved; the check is
    repeated at approval time.
    """
    if quantity is None or quantity <= 0:
        raise ValidationError("Quantity must be at least 1")

    stock = get_stock(db, stock_id)
    if stock.quantity < quantity:
        raise InsufficientStockError("Insufficient stock quantity")

    with transaction(db):
        request = StockRequest(
            user_id=user_id,
            stock_id=stock_id,
            quantity=quantity,
            reason=reason,
            status=RequestStatus.PENDING.value,
        )
        db.add(request)

    db.refresh(request)
    logger.info("User %s requested %d of stock %s (request %s)", user_id, quantity, stock_id, request.id)
    return request


def _ensure_pending(request: StockRequest) -> None:
    if request.status != RequestStatus.PENDING.value:
        raise RequestAlreadyProcessedError(f"Request has already been {request.status}")


def _claim_request(
    db: Session,
    request_id: str,
    new_status: RequestStatus,
    admin_id: str,
    admin_notes: Optional[str]
) -> None:
    """Move a request out of pending; fails if another caller got there first."""
    updated = db.query(StockRequest).filter(
        StockRequest.id == request_id,
        StockRequest.status == RequestStatus.PENDING.value,
    ).update(
        {
            StockRequest.status: new_status.value,
            StockRequest.admin_notes: admin_notes,
            StockRequest.approved_by: admin_id,
        },
        synchronize_session="evaluate",
    )
    if not updated:
        raise RequestAlreadyProcessedError("Request has already been processed")


def approve_request(
    db: Session,
    request_id: str,
    admin_id: str,
    admin_notes: Optional[str] = None
) -> StockRequest:
    """
    Approve a pending request.

    Re-validates availability, decrements the stock, appends a
    ``request_approved`` history entry (signed delta, attributed to the
    requester) and marks the request approved. Either all of it is committed
    or none of it is.
    """
    with transaction(db):
        request = get_request(db, request_id)
        _ensure_pending(request)

        stock = get_stock(db, request.stock_id)
        if stock.quantity < request.quantity:
            logger.warning(
                "Cannot approve request %s: %d requested, %d available",
                request_id, request.quantity, stock.quantity,
            )
            raise InsufficientStockError("Insufficient stock quantity")

        _claim_request(db, request_id, RequestStatus.APPROVED, admin_id, admin_notes)

        decremented = db.query(Stock).filter(
            Stock.id == stock.id,
            Stock.quantity >= request.quantity,
        ).update(
            {Stock.quantity: Stock.quantity - request.quantity},
            synchronize_session="evaluate",
        )
        if not decremented:
            raise InsufficientStockError("Insufficient stock quantity")

        record_history(
            db, stock.id, ChangeType.REQUEST_APPROVED, -request.quantity,
            user_id=request.user_id,
            request_id=request.id,
            notes=f"Request approved by admin: {request.quantity} units allocated",
        )

    db.refresh(request)
    logger.info(
        "Request %s approved by %s: %d units of stock %s allocated",
        request_id, admin_id, request.quantity, request.stock_id,
    )
    return request


def deny_request(
    db: Session,
    request_id: str,
    admin_id: str,
    admin_notes: Optional[str] = None
) -> StockRequest:
    """Deny a pending request. Stock and history are left untouched."""
    with transaction(db):
        request = get_request(db, request_id)
        _ensure_pending(request)
        _claim_request(db, request_id, RequestStatus.DENIED, admin_id, admin_notes)

    db.refresh(request)
    logger.info("Request %s denied by %s", request_id, admin_id)
    return request


def list_requests(db: Session, status: Optional[RequestStatus] = None) -> List[StockRequest]:
    """All requests with requester and stock, newest first."""
    query = db.query(StockRequest).options(
        joinedload(StockRequest.user),
        joinedload(StockRequest.stock),
    )
    if status:
        query = query.filter(StockRequest.status == status.value)
    return query.order_by(StockRequest.created_at.desc()).all()


def list_requests_for_user(db: Session, user_id: str) -> List[StockRequest]:
    return (
        db.query(StockRequest)
        .options(joinedload(StockRequest.stock))
        .filter(StockRequest.user_id == user_id)
        .order_by(StockRequest.created_at.desc())
        .all()
    )


def list_requests_for_stock(db: Session, stock_id: str) -> List[StockRequest]:
    get_stock(db, stock_id)
    return (
        db.query(StockRequest)
        .options(joinedload(StockRequest.user))
        .filter(StockRequest.stock_id == stock_id)
        .order_by(StockRequest.created_at.desc())
        .all()
    )
