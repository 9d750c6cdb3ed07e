# backend/models/users.py
from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), CheckConstraint("role IN ('admin', 'customer')"), nullable=False, default="customer")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Deleting a user removes their cart and order history
    cart_items = relationship("CartItem", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    orders = relationship("Order", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
