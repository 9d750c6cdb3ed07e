# backend/routes/orders.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.errors import StateConflictError, ValidationError
from models.users import User
from schemas.order import (
    OrderCreatePayload, OrderCreated, OrdersList, OrderDetailResponse,
    OrderCancelled, ReorderResult,
)
from services import order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


# Checkout: turn the cart into an order
@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreatePayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        created = order_service.create_order(db, current_user.id, payload.address)
    except (ValidationError, StateConflictError) as e:
        write_log(db, user_id=current_user.id, action="ORDER_CREATE", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"reason": e.message})
        raise

    write_log(db, user_id=current_user.id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
              ip=client_ip(request),
              meta={"order_id": created.order_id, "total": created.total_amount, "items": created.item_count})
    return created


# List the current user's orders, newest first
@router.get("", response_model=OrdersList)
def list_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return OrdersList(orders=order_service.list_orders(db, current_user.id))


# Get details of a specific order
@router.get("/{order_id}", response_model=OrderDetailResponse)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return OrderDetailResponse(order=order_service.get_order(db, current_user.id, order_id))


@router.put("/{order_id}/cancel", response_model=OrderCancelled)
def cancel_order(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = order_service.cancel_order(db, current_user.id, order_id)
    write_log(db, user_id=current_user.id, action="ORDER_CANCEL", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order_id})
    return result


# Put the items of a past order back into the cart
@router.post("/{order_id}/reorder", response_model=ReorderResult)
def reorder(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = order_service.reorder(db, current_user.id, order_id)
    write_log(db, user_id=current_user.id, action="ORDER_REORDER", resource="orders",
              status="SUCCESS" if result.success else "FAIL", ip=client_ip(request),
              meta={"order_id": order_id, "added": result.added_items,
                    "unavailable": len(result.unavailable_items)})
    return result
