import enum
import uuid

from sqlalchemy import Column, Integer, String, Float, DateTime, Date, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class DayStatus(str, enum.Enum):
    available = "available"
    sold_out = "sold_out"


class PaymentMethod(str, enum.Enum):
    zelle = "zelle"
    cash = "cash"


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String, nullable=False, index=True)
    price = Column(Float, nullable=False)
    description = Column(String, nullable=True)
    image = Column(String, nullable=True)

class AvailabilityDay(Base):
    __tablename__ = "availability"

    day = Column(Date, primary_key=True)
    status = Column(Enum(DayStatus), nullable=False, default=DayStatus.available)

class Setting(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False, default="")

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_new_id)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    order_date = Column(Date, nullable=False, index=True)
    order_time = Column(String(5), nullable=False)
    items = Column(Text, nullable=False)  # preformatted QTYxNAME lines
    total = Column(Float, nullable=False)
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.position",
    )

class OrderLine(Base):
    """Normalized copy of what was ordered, kept alongside Order.items."""
    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    # no FK to products: deleting a product must not touch past orders
    product_id = Column(String(32), nullable=True)
    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="lines")
