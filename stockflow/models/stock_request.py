"""Stock request model."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from stockflow.database import Base, generate_uuid


class RequestStatus(str, enum.Enum):
    """Request status. Only pending requests can change state."""
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class StockRequest(Base):
    """A user's ask for some units of a stock item."""
    __tablename__ = "stock_requests"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_requests_quantity_positive"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    stock_id = Column(String(36), ForeignKey("stocks.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(String(20), default=RequestStatus.PENDING.value, nullable=False, index=True)
    admin_notes = Column(Text, nullable=True)
    # Set on both approval and denial
    approved_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", foreign_keys=[user_id], back_populates="requests")
    approver = relationship("User", foreign_keys=[approved_by])
    stock = relationship("Stock", back_populates="requests")
