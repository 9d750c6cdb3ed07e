from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Index, func
from database import Base

# Outcome of a shop action: checkout, cancel, cart change, login, admin edit.
# Rows outlive the user who caused them.
class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(String(50), nullable=False)     # e.g. ORDER_CREATE, CART_ADD
    resource = Column(String(50), nullable=False)   # cart, orders, cakes, auth
    status = Column(String(10), nullable=False, default="SUCCESS")  # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (
        Index("ix_audit_logs_resource_action", "resource", "action"),
    )
