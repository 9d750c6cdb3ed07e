from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Represents one cake (+ quantity) in a user's cart
class CartItem(Base):
    __tablename__ = "carts" # Table name

    id = Column(Integer, primary_key=True, index=True) # Primary key, exposed as cart_id
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    cake_id = Column(Integer, ForeignKey("cakes.id", ondelete="CASCADE"), index=True, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now()) # Creation timestamp

    user = relationship("User", back_populates="cart_items")
    cake = relationship("Cake")

    __table_args__ = (
        # One row per user + cake, repeat adds update the quantity
        UniqueConstraint("user_id", "cake_id", name="uq_cart_user_cake"),
    )
