from sqlalchemy import Column, Integer, String, Text, DateTime, func
from database import Base


# Message submitted through the public contact form
class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(10), default="unread", nullable=False, index=True) # unread / read
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
