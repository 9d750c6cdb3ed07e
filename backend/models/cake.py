# backend/models/cake.py
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Catalog item. Price is kept in currency minor-unit precision,
# stock is the count still available for purchase.
class Cake(Base):
    __tablename__ = "cakes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)
    category = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    images = relationship("CakeImage", back_populates="cake", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def image_urls(self):
        return [img.image_url for img in self.images]


# Image path/URL attached to a cake
class CakeImage(Base):
    __tablename__ = "cake_images"

    id = Column(Integer, primary_key=True, index=True)
    cake_id = Column(Integer, ForeignKey("cakes.id", ondelete="CASCADE"), index=True, nullable=False)
    image_url = Column(String(255), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cake = relationship("Cake", back_populates="images")
