from decimal import Decimal
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


# Checkout payload; address is validated (trimmed, min length) by the order service
class OrderCreatePayload(BaseModel):
    address: Optional[str] = None


# Summary returned right after checkout
class OrderCreated(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = "Order created successfully"
    order_id: int
    total_amount: str
    status: str
    payment_method: str
    address: str
    item_count: int


# One row of the customer's order history
class OrderSummary(BaseModel):
    id: int
    total_amount: Decimal
    status: str
    payment_method: str
    address: str
    created_at: Optional[datetime] = None
    item_count: int


class OrdersList(BaseModel):
    orders: List[OrderSummary]


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    id: int
    cake_id: int
    quantity: int
    price_at_purchase: Decimal
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    images: List[str]
    subtotal: Decimal


class OrderDetail(OrderSummary):
    items: List[OrderItemOut]


class OrderDetailResponse(BaseModel):
    order: OrderDetail


class OrderCancelled(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = "Order cancelled successfully"
    order_id: int


# Cake that could not be put back into the cart on reorder
class UnavailableItem(BaseModel):
    name: str
    requested: int
    available: int


class ReorderResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    added_items: int
    unavailable_items: List[UnavailableItem]
    success: bool


# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: Optional[str] = None


class OrderStatusUpdated(BaseModel):
    message: str = "Order status updated successfully"
    status: str
