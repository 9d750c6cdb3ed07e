from decimal import Decimal
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecentOrder(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    total: Decimal
    status: str
    created_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    item_count: int


# Dashboard aggregates; revenue counts completed orders only
class DashboardStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_orders: int
    total_revenue: Decimal
    total_customers: int
    total_products: int
    pending_orders: int
    completed_orders: int
    recent_orders: List[RecentOrder]


class AdminOrderOut(BaseModel):
    id: int
    user_id: int
    total_amount: Decimal
    status: str
    payment_method: str
    address: str
    created_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None


class AdminOrdersList(BaseModel):
    orders: List[AdminOrderOut]


class AdminOrderItemOut(BaseModel):
    id: int
    cake_id: int
    quantity: int
    price_at_purchase: Decimal
    cake_name: Optional[str] = None


class AdminOrderDetail(AdminOrderOut):
    items: List[AdminOrderItemOut]


class CustomerOut(BaseModel):
    id: int
    username: str
    email: str
    role: str
    created_at: Optional[datetime] = None
    total_orders: int
    total_spent: Decimal
    last_order_date: Optional[datetime] = None


class CustomersList(BaseModel):
    customers: List[CustomerOut]


class CustomerOrderOut(BaseModel):
    id: int
    total_amount: Decimal
    status: str
    created_at: Optional[datetime] = None
    item_count: int


class CustomerDetail(CustomerOut):
    orders: List[CustomerOrderOut]
