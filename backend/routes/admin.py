# backend/routes/admin.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from config import settings
from database import get_db
from models.users import User
from utils.tokenJWT import admin_required
from utils.audit import write_log, client_ip
from schemas.admin import DashboardStats, AdminOrdersList, AdminOrderDetail, CustomersList, CustomerDetail
from schemas.order import OrderStatusPatch, OrderStatusUpdated
from services import admin_service

# Every route here requires an admin token
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(admin_required)])


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard_stats(db: Session = Depends(get_db)):
    return admin_service.dashboard(db)


@router.get("/orders", response_model=AdminOrdersList)
def get_all_orders(db: Session = Depends(get_db)):
    return AdminOrdersList(orders=admin_service.list_orders(db))


@router.get("/orders/{order_id}", response_model=AdminOrderDetail)
def get_order_by_id(order_id: int, db: Session = Depends(get_db)):
    return admin_service.get_order(db, order_id)


# Change order status; inventory only moves if ADMIN_CANCEL_RESTORES_STOCK is set
@router.put("/orders/{order_id}/status", response_model=OrderStatusUpdated)
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    previous = admin_service.update_order_status(
        db, order_id, payload.status,
        restore_stock_on_cancel=settings.ADMIN_CANCEL_RESTORES_STOCK,
    )
    write_log(db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order_id, "old": previous, "new": payload.status})
    return OrderStatusUpdated(status=payload.status)


@router.get("/customers", response_model=CustomersList)
def get_all_customers(db: Session = Depends(get_db)):
    return CustomersList(customers=admin_service.list_customers(db))


@router.get("/customers/{customer_id}", response_model=CustomerDetail)
def get_customer_by_id(customer_id: int, db: Session = Depends(get_db)):
    return admin_service.get_customer(db, customer_id)
