"""
Restaurant and menu models

These tables belong to the restaurant/menu subsystem. The ordering core only
reads them: restaurant availability and fees at intake, menu items for the
order snapshot, and restaurant contact fields for projections.
"""

import uuid

from sqlalchemy import Column, String, DateTime, Text, Float, Integer, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from foodorder.database import Base

def _new_id() -> str:
    return str(uuid.uuid4())

class Restaurant(Base):
    """Restaurant account"""
    __tablename__ = "restaurants"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(150), nullable=False)
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(JSON, nullable=True)
    rating = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    delivery_fee = Column(Float, nullable=True)
    delivery_time_min = Column(Integer, nullable=True)  # minutes
    delivery_time_max = Column(Integer, nullable=True)  # minutes
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    menu_items = relationship("MenuItem", back_populates="restaurant")

    def __repr__(self):
        return f"<Restaurant(id={self.id}, name='{self.name}', active={self.is_active})>"

class MenuCategory(Base):
    """Menu section such as 'Burgers' or 'Drinks'"""
    __tablename__ = "menu_categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), index=True, nullable=False)
    name = Column(String(100), nullable=False)

class MenuItem(Base):
    """Live menu item; orders copy its fields and never point back at it"""
    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), index=True, nullable=False)
    category_id = Column(String(36), ForeignKey("menu_categories.id"), nullable=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    images = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="menu_items")
    category = relationship("MenuCategory")

    def __repr__(self):
        return f"<MenuItem(id={self.id}, name='{self.name}', price={self.price})>"
