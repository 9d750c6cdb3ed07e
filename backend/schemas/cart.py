from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cake_id: int = Field(alias="cakeId")
    quantity: int = Field(default=1, ge=1)

# Request schema for updating cart item quantity
class CartUpdateItem(BaseModel):
    quantity: int = Field(ge=1)

# Response schema for a single cart line, with live cake data
class CartItemOut(BaseModel):
    cart_id: int
    cake_id: int
    quantity: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    category: Optional[str] = None
    images: List[str]
    subtotal: Decimal

# Response schema for the entire cart; total is rendered with two decimals
class CartOut(BaseModel):
    items: List[CartItemOut]
    total: str

class CartMutationResponse(BaseModel):
    message: str
    cart: CartOut

class MessageResponse(BaseModel):
    message: str
