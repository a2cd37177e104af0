from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Text, Enum
from sqlalchemy.orm import relationship
from datetime import datetime

from core.database import Base
from ..enums.order_enums import OrderStatus


class OrderRecord(Base):
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    table_id = Column(
        String(64), ForeignKey("tables.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Orders keep their creation sequence within a table
    position = Column(Integer, nullable=False, default=0)
    status = Column(
        Enum(OrderStatus, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    sent_at = Column(DateTime, nullable=True)
    preparing_at = Column(DateTime, nullable=True)
    done_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)

    table = relationship("TableRecord", back_populates="orders")
    items = relationship(
        "OrderItemRecord",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemRecord.position",
    )


class OrderItemRecord(Base):
    """Denormalized copy of a menu item as it was when the order was sent."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        String(64), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    menu_item_id = Column(String(64), nullable=False)
    name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=False, default="")
    image = Column(String(500), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    order = relationship("OrderRecord", back_populates="items")
