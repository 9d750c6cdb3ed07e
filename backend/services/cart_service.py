# backend/services/cart_service.py
"""Per-user cart, kept consistent with live cake stock.

Every mutation checks the cake's stock at the moment of the change; the
returned cart always carries live name, price, stock and images.
"""
import logging
from decimal import Decimal

from sqlalchemy.orm import Session, joinedload, selectinload

from database import transaction
from models.cake import Cake
from models.cart import CartItem
from schemas.cart import CartItemOut, CartOut
from utils.errors import NotFoundError, OutOfStockError, InsufficientStockError
from utils.money import to_money, format_money

logger = logging.getLogger(__name__)


def _cart_to_out(items) -> CartOut:
    items_out = []
    total = Decimal("0") # Sum of line subtotals

    for it in items:
        cake = it.cake
        subtotal = to_money(cake.price * it.quantity)
        total += subtotal

        items_out.append(CartItemOut(
            cart_id=it.id,
            cake_id=cake.id,
            quantity=it.quantity,
            name=cake.name,
            description=cake.description,
            price=to_money(cake.price),
            stock=cake.stock,
            category=cake.category,
            images=cake.image_urls,
            subtotal=subtotal,
        ))

    return CartOut(items=items_out, total=format_money(total))


def _owned_item(db: Session, user_id: int, cart_id: int) -> CartItem:
    item = db.query(CartItem).filter(CartItem.id == cart_id, CartItem.user_id == user_id).first()
    if not item:
        raise NotFoundError("Cart item not found or not yours")
    return item


def stage_item(db: Session, user_id: int, cake: Cake, quantity: int) -> CartItem:
    """Add ``quantity`` of ``cake`` to the user's cart, merging with an existing line.

    Raises OutOfStockError when the cake has no stock and InsufficientStockError
    when the merged quantity would exceed it. Nothing is written on failure.
    Runs inside the caller's transaction.
    """
    if cake.stock <= 0:
        raise OutOfStockError()

    item = db.query(CartItem).filter(CartItem.user_id == user_id, CartItem.cake_id == cake.id).first()
    in_cart = item.quantity if item else 0
    requested_total = in_cart + quantity

    if requested_total > cake.stock:
        raise InsufficientStockError(cake.name, cake.stock, in_cart=in_cart)

    if item:
        item.quantity = requested_total
    else:
        item = CartItem(user_id=user_id, cake_id=cake.id, quantity=quantity)
        db.add(item)
    db.flush()
    return item


def get_cart(db: Session, user_id: int) -> CartOut:
    items = (
        db.query(CartItem)
        .options(joinedload(CartItem.cake).selectinload(Cake.images))
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.desc(), CartItem.id.desc())
        .all()
    )
    return _cart_to_out(items)


def add_item(db: Session, user_id: int, cake_id: int, quantity: int) -> CartOut:
    with transaction(db):
        cake = db.query(Cake).filter(Cake.id == cake_id).first()
        if not cake:
            raise NotFoundError("Cake not found")
        stage_item(db, user_id, cake, quantity)

    return get_cart(db, user_id)


def update_quantity(db: Session, user_id: int, cart_id: int, quantity: int, check_stock: bool = True) -> CartOut:
    with transaction(db):
        item = _owned_item(db, user_id, cart_id)
        cake = item.cake
        if check_stock and quantity > cake.stock:
            raise InsufficientStockError(cake.name, cake.stock)
        item.quantity = quantity

    return get_cart(db, user_id)


def remove_item(db: Session, user_id: int, cart_id: int) -> None:
    with transaction(db):
        item = _owned_item(db, user_id, cart_id)
        db.delete(item)


def clear_cart(db: Session, user_id: int) -> int:
    with transaction(db):
        removed = db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)
    logger.debug("Cleared %d cart items for user %s", removed, user_id)
    return removed
