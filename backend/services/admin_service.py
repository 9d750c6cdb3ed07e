# backend/services/admin_service.py
import logging
from typing import List

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from database import transaction
from models.cake import Cake
from models.order import Order, OrderItem, OrderStatus, ADMIN_STATUSES
from models.users import User
from schemas.admin import (
    DashboardStats, RecentOrder, AdminOrderOut, AdminOrderDetail, AdminOrderItemOut,
    CustomerOut, CustomerDetail, CustomerOrderOut,
)
from services.order_service import restore_stock
from utils.errors import NotFoundError, InvalidStatusError, StateConflictError
from utils.money import to_money

logger = logging.getLogger(__name__)

RECENT_ORDERS_LIMIT = 5


def _count_orders(db: Session, status: str = None) -> int:
    query = db.query(func.count(Order.id))
    if status:
        query = query.filter(Order.status == status)
    return query.scalar() or 0


def dashboard(db: Session) -> DashboardStats:
    revenue = (
        db.query(func.sum(Order.total_amount))
        .filter(Order.status == OrderStatus.COMPLETED.value)
        .scalar()
    )

    item_count = func.count(OrderItem.id).label("item_count")
    recent_rows = (
        db.query(Order, User.username, item_count)
        .outerjoin(User, Order.user_id == User.id)
        .outerjoin(OrderItem, OrderItem.order_id == Order.id)
        .group_by(Order.id, User.username)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(RECENT_ORDERS_LIMIT)
        .all()
    )

    return DashboardStats(
        total_orders=_count_orders(db),
        total_revenue=to_money(revenue or 0),
        total_customers=db.query(func.count(User.id)).filter(User.role == "customer").scalar() or 0,
        total_products=db.query(func.count(Cake.id)).scalar() or 0,
        pending_orders=_count_orders(db, OrderStatus.PENDING.value),
        completed_orders=_count_orders(db, OrderStatus.COMPLETED.value),
        recent_orders=[
            RecentOrder(
                id=o.id,
                total=to_money(o.total_amount),
                status=o.status,
                created_at=o.created_at,
                customer_name=username,
                item_count=count,
            )
            for o, username, count in recent_rows
        ],
    )


def _admin_order_out(order: Order, user: User) -> dict:
    return dict(
        id=order.id,
        user_id=order.user_id,
        total_amount=to_money(order.total_amount),
        status=order.status,
        payment_method=order.payment_method,
        address=order.address,
        created_at=order.created_at,
        customer_name=user.username if user else None,
        customer_email=user.email if user else None,
    )


def list_orders(db: Session) -> List[AdminOrderOut]:
    rows = (
        db.query(Order, User)
        .outerjoin(User, Order.user_id == User.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return [AdminOrderOut(**_admin_order_out(o, u)) for o, u in rows]


def get_order(db: Session, order_id: int) -> AdminOrderDetail:
    order = (
        db.query(Order)
        .options(joinedload(Order.user), joinedload(Order.items).joinedload(OrderItem.cake))
        .filter(Order.id == order_id)
        .first()
    )
    if not order:
        raise NotFoundError("Order not found")

    items = [
        AdminOrderItemOut(
            id=it.id,
            cake_id=it.cake_id,
            quantity=it.quantity,
            price_at_purchase=to_money(it.price_at_purchase),
            cake_name=it.cake.name if it.cake else None,
        )
        for it in sorted(order.items, key=lambda i: i.id)
    ]
    return AdminOrderDetail(**_admin_order_out(order, order.user), items=items)


def update_order_status(db: Session, order_id: int, status, restore_stock_on_cancel: bool = False) -> str:
    """Set an order's status. Returns the previous status.

    Inventory only moves when ``restore_stock_on_cancel`` is on: entering
    ``cancelled`` then puts the items back, and leaving ``cancelled`` is refused
    because the stock was already returned.
    """
    if status not in ADMIN_STATUSES:
        raise InvalidStatusError()

    with transaction(db):
        order = db.query(Order).filter(Order.id == order_id).with_for_update().first()
        if not order:
            raise NotFoundError("Order not found")

        previous = order.status
        cancelled = OrderStatus.CANCELLED.value
        if restore_stock_on_cancel:
            if previous == cancelled and status != cancelled:
                raise StateConflictError("Cannot reopen a cancelled order")
            if status == cancelled and previous != cancelled:
                restore_stock(db, order)

        order.status = status

    logger.info("Order %s status %s -> %s", order_id, previous, status)
    return previous


def _customer_query(db: Session):
    completed_total = case(
        (Order.status == OrderStatus.COMPLETED.value, Order.total_amount),
        else_=0,
    )
    return (
        db.query(
            User,
            func.count(func.distinct(Order.id)).label("total_orders"),
            func.coalesce(func.sum(completed_total), 0).label("total_spent"),
            func.max(Order.created_at).label("last_order_date"),
        )
        .outerjoin(Order, Order.user_id == User.id)
        .group_by(User.id)
    )


def _customer_out(user: User, total_orders, total_spent, last_order_date) -> dict:
    return dict(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
        total_orders=total_orders or 0,
        total_spent=to_money(total_spent or 0),
        last_order_date=last_order_date,
    )


def list_customers(db: Session) -> List[CustomerOut]:
    rows = (
        _customer_query(db)
        .filter(User.role != "admin")
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )
    return [CustomerOut(**_customer_out(*row)) for row in rows]


def get_customer(db: Session, customer_id: int) -> CustomerDetail:
    row = _customer_query(db).filter(User.id == customer_id).first()
    if not row:
        raise NotFoundError("Customer not found")

    orders = (
        db.query(Order, func.count(OrderItem.id).label("item_count"))
        .outerjoin(OrderItem, OrderItem.order_id == Order.id)
        .filter(Order.user_id == customer_id)
        .group_by(Order.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return CustomerDetail(
        **_customer_out(*row),
        orders=[
            CustomerOrderOut(
                id=o.id,
                total_amount=to_money(o.total_amount),
                status=o.status,
                created_at=o.created_at,
                item_count=count,
            )
            for o, count in orders
        ],
    )
