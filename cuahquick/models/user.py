"""User model definitions."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from cuahquick.database import Base

ROLE_CLIENT = "client"
ROLE_SHOP = "shop"
USER_ROLES = (ROLE_CLIENT, ROLE_SHOP)


class User(Base):
    """Represents a registered client or shop account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_CLIENT)  # client/shop
    student_id = Column(String(30), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
