# backend/routes/contact.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import admin_required
from schemas.contact import ContactCreate, ContactSubmitted, ContactMessageOut, MessagesList
from schemas.cart import MessageResponse
from services import contact_service

router = APIRouter(prefix="/contact", tags=["Contact"])


# Public contact form
@router.post("", response_model=ContactSubmitted, status_code=status.HTTP_201_CREATED)
def submit_contact_form(payload: ContactCreate, db: Session = Depends(get_db)):
    message_id = contact_service.submit_message(db, payload)
    return ContactSubmitted(message_id=message_id)


@router.get("", response_model=MessagesList, dependencies=[Depends(admin_required)])
def get_all_messages(db: Session = Depends(get_db)):
    messages = contact_service.list_messages(db)
    return MessagesList(messages=[ContactMessageOut.model_validate(m) for m in messages])


@router.put("/{message_id}/read", response_model=MessageResponse, dependencies=[Depends(admin_required)])
def mark_message_as_read(message_id: int, db: Session = Depends(get_db)):
    contact_service.mark_read(db, message_id)
    return MessageResponse(message="Message marked as read")


@router.delete("/{message_id}", response_model=MessageResponse, dependencies=[Depends(admin_required)])
def delete_message(message_id: int, db: Session = Depends(get_db)):
    contact_service.delete_message(db, message_id)
    return MessageResponse(message="Message deleted successfully")
