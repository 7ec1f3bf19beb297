"""Order model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from cuahquick.database import Base

STATUS_PENDING = "pending"
STATUS_PREPARING = "preparing"
STATUS_READY = "ready"
STATUS_DELIVERED = "delivered"
STATUS_CANCELLED = "cancelled"

ORDER_STATUSES = (
    STATUS_PENDING,
    STATUS_PREPARING,
    STATUS_READY,
    STATUS_DELIVERED,
    STATUS_CANCELLED,
)
ACTIVE_ORDER_STATUSES = (STATUS_PENDING, STATUS_PREPARING, STATUS_READY)


class Order(Base):
    """Represents a delivery order placed by a user."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    shop_id = Column(Integer, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)
    building = Column(String(100), nullable=False)
    classroom = Column(String(100), nullable=False)
    delivery_notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
