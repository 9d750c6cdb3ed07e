from typing import List

from sqlalchemy.orm import Session

from database import transaction
from models.contact import ContactMessage
from schemas.contact import ContactCreate
from utils.errors import NotFoundError


def submit_message(db: Session, payload: ContactCreate) -> int:
    with transaction(db):
        msg = ContactMessage(
            name=payload.name.strip(),
            email=str(payload.email),
            phone=payload.phone or None,
            subject=payload.subject.strip(),
            message=payload.message,
        )
        db.add(msg)
        db.flush()
        message_id = msg.id
    return message_id


def list_messages(db: Session) -> List[ContactMessage]:
    return db.query(ContactMessage).order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()


def _get_message(db: Session, message_id: int) -> ContactMessage:
    msg = db.query(ContactMessage).filter(ContactMessage.id == message_id).first()
    if not msg:
        raise NotFoundError("Message not found")
    return msg


def mark_read(db: Session, message_id: int) -> None:
    with transaction(db):
        _get_message(db, message_id).status = "read"


def delete_message(db: Session, message_id: int) -> None:
    with transaction(db):
        db.delete(_get_message(db, message_id))
