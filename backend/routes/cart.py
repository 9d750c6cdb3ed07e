# backend/routes/cart.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from config import settings
from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from models.users import User
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartMutationResponse, MessageResponse
from services import cart_service

router = APIRouter(prefix="/cart", tags=["Cart"])

@router.get("", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return cart_service.get_cart(db, current_user.id)

@router.post("", response_model=CartMutationResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.add_item(db, current_user.id, payload.cake_id, payload.quantity)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        ip=client_ip(request),
        meta={"cake_id": payload.cake_id, "quantity": payload.quantity, "cart_items": len(cart.items), "total": cart.total},
    )
    return CartMutationResponse(message="Item added to cart successfully", cart=cart)

@router.put("/{cart_id}", response_model=CartMutationResponse)
def update_cart_item(
    cart_id: int,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.update_quantity(
        db, current_user.id, cart_id, payload.quantity,
        check_stock=settings.CART_UPDATE_CHECKS_STOCK,
    )

    write_log(
        db,
        user_id=current_user.id,
        action="CART_UPDATE",
        resource="cart",
        ip=client_ip(request),
        meta={"cart_id": cart_id, "quantity": payload.quantity, "total": cart.total},
    )
    return CartMutationResponse(message="Cart item updated", cart=cart)

@router.delete("/{cart_id}", response_model=MessageResponse)
def delete_cart_item(
    cart_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart_service.remove_item(db, current_user.id, cart_id)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_DELETE",
        resource="cart",
        ip=client_ip(request),
        meta={"cart_id": cart_id},
    )
    return MessageResponse(message="Item removed from cart")

@router.delete("", response_model=MessageResponse)
def clear_cart(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    removed = cart_service.clear_cart(db, current_user.id)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_CLEAR",
        resource="cart",
        ip=client_ip(request),
        meta={"removed": removed},
    )
    return MessageResponse(message="Cart cleared")
