"""Stock catalog queries, stock administration and manual quantity adjustments."""
import logging
from typing import List, Optional, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from stockflow.database import transaction
from stockflow.exceptions import InvalidAdjustmentError, NotFoundError, ValidationError
from stockflow.models.stock import ChangeType, Stock, StockHistory
from stockflow.models.stock_request import RequestStatus, StockRequest
from stockflow.schemas.stock import StockCreate, StockUpdate

logger = logging.getLogger(__name__)

ADJUSTMENT_TYPES = (ChangeType.ADDED.value, ChangeType.REMOVED.value)


def record_history(
    db: Session,
    stock_id: str,
    change_type: ChangeType,
    quantity: int,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
    notes: Optional[str] = None
) -> StockHistory:
    """Append a history entry. ``quantity`` is the signed delta."""
    history = StockHistory(
        stock_id=stock_id,
        change_type=change_type.value,
        quantity=quantity,
        user_id=user_id,
        request_id=request_id,
        notes=notes,
    )
    db.add(history)
    return history


def list_stocks(
    db: Session,
    search: Optional[str] = None,
    category: Optional[str] = None,
    skip: int = 0,
    limit: int = 100
) -> List[Stock]:
    """List stock items, newest first, optionally filtered by search term or category."""
    query = db.query(Stock)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(Stock.name.ilike(search_term), Stock.code.ilike(search_term))
        )

    if category:
        query = query.filter(Stock.category == category)

    return query.order_by(Stock.created_at.desc()).offset(skip).limit(limit).all()


def list_categories(db: Session) -> List[str]:
    rows = (
        db.query(Stock.category)
        .filter(Stock.category.isnot(None))
        .distinct()
        .order_by(Stock.category)
        .all()
    )
    return [row[0] for row in rows]


def get_stock(db: Session, stock_id: str) -> Stock:
    stock = db.query(Stock).filter(Stock.id == stock_id).first()
    if not stock:
        raise NotFoundError("Stock not found")
    return stock


def _ensure_code_available(db: Session, code: str) -> None:
    existing = db.query(Stock).filter(Stock.code == code).first()
    if existing:
        raise ValidationError("Stock code already exists")


def create_stock(db: Session, stock_data: StockCreate, actor_id: Optional[str] = None) -> Stock:
    """Create a stock item together with its initial history entry."""
    _ensure_code_available(db, stock_data.code)

    with transaction(db):
        stock = Stock(**stock_data.model_dump())
        db.add(stock)
        db.flush()
        record_history(
            db, stock.id, ChangeType.ADDED, stock.quantity,
            user_id=actor_id,
            notes="Initial stock creation",
        )

    db.refresh(stock)
    logger.info("Created stock %s (%s) with quantity %d", stock.code, stock.id, stock.quantity)
    return stock


def update_stock(db: Session, stock_id: str, stock_update: StockUpdate) -> Stock:
    """Update descriptive fields of a stock item."""
    stock = get_stock(db, stock_id)

    update_data = stock_update.model_dump(exclude_unset=True)
    # code and name are required columns
    for field in ("code", "name"):
        if field in update_data and update_data[field] is None:
            raise ValidationError(f"{field.capitalize()} cannot be empty")

    if stock_update.code and stock_update.code != stock.code:
        _ensure_code_available(db, stock_update.code)

    with transaction(db):
        for field, value in update_data.items():
            setattr(stock, field, value)

    db.refresh(stock)
    return stock


def delete_stock(db: Session, stock_id: str) -> None:
    """Delete a stock item along with its history and resolved requests."""
    stock = get_stock(db, stock_id)

    pending = (
        db.query(StockRequest)
        .filter(
            StockRequest.stock_id == stock_id,
            StockRequest.status == RequestStatus.PENDING.value,
        )
        .count()
    )
    if pending:
        raise ValidationError(
            "Cannot delete stock with pending requests. Approve or deny them first."
        )

    code = stock.code
    with transaction(db):
        db.delete(stock)
    logger.info("Deleted stock %s (%s)", code, stock_id)


def adjust_stock_quantity(
    db: Session,
    stock_id: str,
    change_type: Union[ChangeType, str],
    quantity: int,
    comment: str,
    actor_id: Optional[str] = None
) -> Stock:
    """
    Add or remove units by hand.

    The sign of the change comes from ``change_type``; ``quantity`` is always
    a positive magnitude and ``comment`` is mandatory. Removal is a conditional
    decrement, so the quantity cannot go below zero even under concurrent
    writers. Writes exactly one history entry.
    """
    change_value = getattr(change_type, "value", change_type)
    if change_value not in ADJUSTMENT_TYPES:
        raise ValidationError("Change type must be 'added' or 'removed'")
    if quantity is None or quantity <= 0:
        raise ValidationError("Quantity must be at least 1")
    if not comment or not comment.strip():
        raise ValidationError("Comment is required for quantity adjustment")

    change = ChangeType(change_value)
    with transaction(db):
        stock = get_stock(db, stock_id)

        if change == ChangeType.ADDED:
            delta = quantity
            db.query(Stock).filter(Stock.id == stock_id).update(
                {Stock.quantity: Stock.quantity + quantity},
                synchronize_session="evaluate",
            )
        else:
            delta = -quantity
            updated = db.query(Stock).filter(
                Stock.id == stock_id,
                Stock.quantity >= quantity,
            ).update(
                {Stock.quantity: Stock.quantity - quantity},
                synchronize_session="evaluate",
            )
            if not updated:
                # the loaded row may be stale if another writer got in first
                available = db.query(Stock.quantity).filter(Stock.id == stock_id).scalar()
                logger.warning(
                    "Rejected removal of %d from stock %s (available %d)",
                    quantity, stock_id, available,
                )
                raise InvalidAdjustmentError(
                    f"Cannot remove {quantity} items. Only {available} available in stock."
                )

        record_history(
            db, stock_id, change, delta,
            user_id=actor_id,
            notes=comment.strip(),
        )

    db.refresh(stock)
    logger.info(
        "Adjusted stock %s by %+d to %d (actor %s)",
        stock_id, delta, stock.quantity, actor_id,
    )
    return stock


def get_stock_history(db: Session, stock_id: str) -> List[StockHistory]:
    """Get history entries for a stock item, newest first."""
    get_stock(db, stock_id)
    return (
        db.query(StockHistory)
        .options(joinedload(StockHistory.user))
        .filter(StockHistory.stock_id == stock_id)
        .order_by(StockHistory.created_at.desc())
        .all()
    )
