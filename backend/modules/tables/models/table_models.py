# backend/modules/tables/models/table_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Enum as SQLEnum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum

from core.database import Base


class TableStatus(str, Enum):
    """Table availability status"""

    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


class TableRecord(Base):
    """Persisted dining table with its open orders"""

    __tablename__ = "tables"
    __table_args__ = (
        CheckConstraint("number > 0", name="check_table_number_positive"),
        CheckConstraint("seats > 0", name="check_table_seats_positive"),
    )

    id = Column(String(64), primary_key=True)
    number = Column(Integer, nullable=False, unique=True, index=True)
    seats = Column(Integer, nullable=False)
    status = Column(
        SQLEnum(TableStatus, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=TableStatus.AVAILABLE,
    )
    # Weak reference; a deleted waiter leaves the id dangling
    waiter_id = Column(String(64), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    orders = relationship(
        "OrderRecord",
        back_populates="table",
        cascade="all, delete-orphan",
        order_by="OrderRecord.position",
    )

    def __repr__(self):
        return f"<TableRecord(id='{self.id}', number={self.number}, status={self.status})>"
