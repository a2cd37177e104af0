# backend/modules/menu/models/menu_models.py

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric, ForeignKey
from datetime import datetime

from core.database import Base


class MenuCategoryRecord(Base):
    __tablename__ = "menu_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<MenuCategoryRecord(id={self.id}, name='{self.name}')>"


class MenuItemRecord(Base):
    __tablename__ = "menu_items"

    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    # Category names are keys; a rename rewrites every referencing item
    category = Column(
        String(100),
        ForeignKey("menu_categories.name", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=False, default="")
    image = Column(String(500), nullable=False, default="")
    available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self):
        return f"<MenuItemRecord(id='{self.id}', name='{self.name}', price={self.price})>"
