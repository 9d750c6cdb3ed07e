# backend/services/order_service.py
"""Checkout, order history, cancellation and reorder.

Checkout and cancellation are all-or-nothing: stock, order rows and the cart
change together inside one transaction or not at all. Reorder is best effort,
it stages whatever lines still fit into the cart and reports the rest.
"""
import logging
from decimal import Decimal
from typing import List

from sqlalchemy import func, update
from sqlalchemy.orm import Session, joinedload, selectinload

from database import transaction
from models.cake import Cake
from models.cart import CartItem
from models.order import Order, OrderItem, OrderStatus, CANCELLABLE_STATUSES, PAYMENT_METHOD_COD
from schemas.order import (
    OrderCreated, OrderSummary, OrderDetail, OrderItemOut,
    OrderCancelled, ReorderResult, UnavailableItem,
)
from services.cart_service import stage_item
from utils.errors import (
    NotFoundError, InvalidAddressError, EmptyCartError, EmptyOrderError,
    InsufficientStockError, InvalidTransitionError, OutOfStockError,
)
from utils.money import to_money, format_money

logger = logging.getLogger(__name__)

MIN_ADDRESS_LENGTH = 5


def _owned_order(db: Session, user_id: int, order_id: int, lock: bool = False) -> Order:
    query = db.query(Order).filter(Order.id == order_id, Order.user_id == user_id)
    if lock:
        query = query.with_for_update()
    order = query.first()
    if not order:
        raise NotFoundError("Order not found or not yours")
    return order


def _take_stock(db: Session, cake: Cake, quantity: int) -> None:
    # Conditional decrement: matches no row if another checkout got there first
    result = db.execute(
        update(Cake)
        .where(Cake.id == cake.id, Cake.stock >= quantity)
        .values(stock=Cake.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        available = db.query(Cake.stock).filter(Cake.id == cake.id).scalar() or 0
        raise InsufficientStockError(cake.name, available)


def restore_stock(db: Session, order: Order) -> None:
    """Put every item of ``order`` back on the shelf. Runs in the caller's transaction."""
    for item in order.items:
        db.execute(
            update(Cake)
            .where(Cake.id == item.cake_id)
            .values(stock=Cake.stock + item.quantity)
            .execution_options(synchronize_session=False)
        )


def create_order(db: Session, user_id: int, address) -> OrderCreated:
    address = address.strip() if isinstance(address, str) else ""
    if len(address) < MIN_ADDRESS_LENGTH:
        raise InvalidAddressError()

    with transaction(db):
        # 1. Cart lines with live price and stock
        lines = (
            db.query(CartItem)
            .options(joinedload(CartItem.cake))
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.id)
            .all()
        )
        if not lines:
            raise EmptyCartError()

        # 2. Validate stock and compute the total
        total = Decimal("0")
        for line in lines:
            if line.cake.stock < line.quantity:
                raise InsufficientStockError(line.cake.name, line.cake.stock)
            total += line.cake.price * line.quantity
        total = to_money(total)

        # 3. Order header
        order = Order(
            user_id=user_id,
            total_amount=total,
            status=OrderStatus.PENDING.value,
            payment_method=PAYMENT_METHOD_COD,
            address=address,
        )
        db.add(order)
        db.flush()

        # 4. Items with price snapshot, then stock decrement
        for line in lines:
            db.add(OrderItem(
                order_id=order.id,
                cake_id=line.cake_id,
                quantity=line.quantity,
                price_at_purchase=to_money(line.cake.price),
            ))
            _take_stock(db, line.cake, line.quantity)

        # 5. Empty the cart
        db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)

        order_id = order.id
        item_count = len(lines)

    logger.info("Order %s created for user %s, total %s", order_id, user_id, total)
    return OrderCreated(
        order_id=order_id,
        total_amount=format_money(total),
        status=OrderStatus.PENDING.value,
        payment_method=PAYMENT_METHOD_COD,
        address=address,
        item_count=item_count,
    )


def list_orders(db: Session, user_id: int) -> List[OrderSummary]:
    rows = (
        db.query(Order, func.count(OrderItem.id).label("item_count"))
        .outerjoin(OrderItem, OrderItem.order_id == Order.id)
        .filter(Order.user_id == user_id)
        .group_by(Order.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return [
        OrderSummary(
            id=o.id,
            total_amount=to_money(o.total_amount),
            status=o.status,
            payment_method=o.payment_method,
            address=o.address,
            created_at=o.created_at,
            item_count=item_count,
        )
        for o, item_count in rows
    ]


def get_order(db: Session, user_id: int, order_id: int) -> OrderDetail:
    order = (
        db.query(Order)
        .options(selectinload(Order.items).joinedload(OrderItem.cake).selectinload(Cake.images))
        .filter(Order.id == order_id, Order.user_id == user_id)
        .first()
    )
    if not order:
        raise NotFoundError("Order not found or not yours")

    items = [
        OrderItemOut(
            id=it.id,
            cake_id=it.cake_id,
            quantity=it.quantity,
            price_at_purchase=to_money(it.price_at_purchase),
            name=it.cake.name,
            description=it.cake.description,
            category=it.cake.category,
            images=it.cake.image_urls,
            subtotal=to_money(it.price_at_purchase * it.quantity),
        )
        for it in sorted(order.items, key=lambda i: i.id)
    ]
    return OrderDetail(
        id=order.id,
        total_amount=to_money(order.total_amount),
        status=order.status,
        payment_method=order.payment_method,
        address=order.address,
        created_at=order.created_at,
        item_count=len(items),
        items=items,
    )


def cancel_order(db: Session, user_id: int, order_id: int) -> OrderCancelled:
    with transaction(db):
        order = _owned_order(db, user_id, order_id, lock=True)
        if order.status not in CANCELLABLE_STATUSES:
            raise InvalidTransitionError(order.status)

        restore_stock(db, order)
        order.status = OrderStatus.CANCELLED.value

    logger.info("Order %s cancelled by user %s", order_id, user_id)
    return OrderCancelled(order_id=order_id)


def reorder(db: Session, user_id: int, order_id: int) -> ReorderResult:
    with transaction(db):
        order = _owned_order(db, user_id, order_id)
        items = (
            db.query(OrderItem)
            .options(joinedload(OrderItem.cake))
            .filter(OrderItem.order_id == order.id)
            .order_by(OrderItem.id)
            .all()
        )
        if not items:
            raise EmptyOrderError()

        added: List[str] = []
        unavailable: List[UnavailableItem] = []
        for item in items:
            # Skip a failing line only, the rest of the order is still staged
            try:
                stage_item(db, user_id, item.cake, item.quantity)
            except OutOfStockError:
                unavailable.append(UnavailableItem(name=item.cake.name, requested=item.quantity, available=0))
                continue
            except InsufficientStockError as e:
                # What can still be added on top of the cart, not raw stock
                unavailable.append(UnavailableItem(
                    name=item.cake.name,
                    requested=item.quantity,
                    available=max(e.available - (e.in_cart or 0), 0),
                ))
                continue
            added.append(item.cake.name)

    logger.info("Reorder of %s by user %s: %d added, %d unavailable", order_id, user_id, len(added), len(unavailable))
    return ReorderResult(
        message="Items added to cart" if added else "None of the items are available right now",
        added_items=len(added),
        unavailable_items=unavailable,
        success=len(added) > 0,
    )
