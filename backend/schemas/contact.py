from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


# Public contact form payload
class ContactCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    subject: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)


class ContactSubmitted(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = "Message sent successfully! We'll get back to you soon."
    message_id: int


class ContactMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    status: str
    created_at: Optional[datetime] = None


class MessagesList(BaseModel):
    messages: List[ContactMessageOut]
