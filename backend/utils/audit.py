import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session
from models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host


# Called after the business transaction has committed, in its own commit
def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = AuditLog(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()
    logger.info("%s %s user=%s %s", action, status, user_id, meta or {})
