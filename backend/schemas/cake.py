from decimal import Decimal
from datetime import datetime
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared base attributes for cakes
class CakeBase(ORMBase):
    name: str = Field(min_length=1, max_length=150)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    category: Optional[str] = None


# Image paths are already hosted; the first one becomes the primary image
class CakeCreate(CakeBase):
    images: List[str] = Field(default_factory=list)


# Schema for partial cake updates
class CakeUpdate(ORMBase):
    """All fields optional; ``images`` replaces the whole image set when given."""
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    images: Optional[List[str]] = None


class CakeOut(CakeBase):
    id: int
    created_at: Optional[datetime] = None
    images: List[str] = Field(default_factory=list, validation_alias=AliasChoices("image_urls", "images"))


class CakeCreated(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    cake_id: int
    cake: CakeOut
