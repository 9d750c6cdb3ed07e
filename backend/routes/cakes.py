# backend/routes/cakes.py
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from utils.tokenJWT import admin_required
from utils.audit import write_log, client_ip
from schemas.cake import CakeCreate, CakeUpdate, CakeOut, CakeCreated
from schemas.cart import MessageResponse
from services import catalog_service

router = APIRouter(prefix="/cakes", tags=["Cakes"])


# Public catalog
@router.get("", response_model=List[CakeOut])
def list_cakes(db: Session = Depends(get_db)):
    return [CakeOut.model_validate(c) for c in catalog_service.list_cakes(db)]


@router.get("/{cake_id}", response_model=CakeOut)
def get_cake(cake_id: int, db: Session = Depends(get_db)):
    return CakeOut.model_validate(catalog_service.get_cake(db, cake_id))


@router.post("", response_model=CakeCreated, status_code=status.HTTP_201_CREATED)
def create_cake(
    payload: CakeCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    cake = catalog_service.create_cake(db, payload)
    write_log(db, user_id=current_user.id, action="CAKE_CREATE", resource="cakes",
              ip=client_ip(request), meta={"id": cake.id, "name": cake.name})
    return CakeCreated(message="Cake created successfully", cake_id=cake.id, cake=CakeOut.model_validate(cake))


@router.put("/{cake_id}", response_model=CakeOut)
def update_cake(
    cake_id: int,
    payload: CakeUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    cake = catalog_service.update_cake(db, cake_id, payload)
    write_log(db, user_id=current_user.id, action="CAKE_UPDATE", resource="cakes",
              ip=client_ip(request), meta={"id": cake_id, "fields": sorted(payload.model_fields_set)})
    return CakeOut.model_validate(cake)


@router.delete("/{cake_id}", response_model=MessageResponse)
def delete_cake(
    cake_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    catalog_service.delete_cake(db, cake_id)
    write_log(db, user_id=current_user.id, action="CAKE_DELETE", resource="cakes",
              ip=client_ip(request), meta={"id": cake_id})
    return MessageResponse(message="Cake deleted successfully")
