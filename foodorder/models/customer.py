"""
Customer model, owned by the identity subsystem and read here for projections
"""

import uuid

from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.sql import func
from foodorder.database import Base

class Customer(Base):
    """Customer account as seen by the ordering core"""
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=True)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"
