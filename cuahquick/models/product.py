"""Product model definitions."""

from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text

from cuahquick.database import Base


class Product(Base):
    """Represents a catalog item shown on the menu."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(50), nullable=False, default="general")
    is_available = Column(Boolean, nullable=False, default=True)
