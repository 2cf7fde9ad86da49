"""Stock item and stock history models."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from stockflow.database import Base, generate_uuid


class ChangeType(str, enum.Enum):
    """Kinds of quantity change recorded in stock history."""
    ADDED = "added"
    REMOVED = "removed"
    REQUEST_APPROVED = "request_approved"


class Stock(Base):
    """
    Inventory record with an on-hand quantity.

    The quantity is denormalized here; stock history is the audit trail,
    not the source of truth.
    """
    __tablename__ = "stocks"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_stocks_quantity_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    code = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    quantity = Column(Integer, default=0, nullable=False)
    category = Column(String(100), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    requests = relationship("StockRequest", back_populates="stock", cascade="all, delete-orphan")
    history = relationship("StockHistory", back_populates="stock", cascade="all, delete-orphan")


class StockHistory(Base):
    """
    Append-only journal of quantity changes.

    ``quantity`` is the signed delta applied to the stock.
    """
    __tablename__ = "stock_history"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    stock_id = Column(String(36), ForeignKey("stocks.id"), nullable=False, index=True)
    change_type = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)

    # Who the change is attributed to (for approvals: the requester)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    request_id = Column(String(36), ForeignKey("stock_requests.id"), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    stock = relationship("Stock", back_populates="history")
    user = relationship("User")
    request = relationship("StockRequest")
