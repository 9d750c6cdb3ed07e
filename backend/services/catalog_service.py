# backend/services/catalog_service.py
import logging
from typing import List

from sqlalchemy.orm import Session, selectinload

from database import transaction
from models.cake import Cake, CakeImage
from schemas.cake import CakeCreate, CakeUpdate
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)


def _build_images(urls: List[str]) -> List[CakeImage]:
    # First image is the primary one
    return [CakeImage(image_url=url, is_primary=(i == 0)) for i, url in enumerate(urls)]


def list_cakes(db: Session) -> List[Cake]:
    return (
        db.query(Cake)
        .options(selectinload(Cake.images))
        .order_by(Cake.created_at.desc(), Cake.id.desc())
        .all()
    )


def get_cake(db: Session, cake_id: int) -> Cake:
    cake = db.query(Cake).options(selectinload(Cake.images)).filter(Cake.id == cake_id).first()
    if not cake:
        raise NotFoundError("Cake not found")
    return cake


def create_cake(db: Session, payload: CakeCreate) -> Cake:
    with transaction(db):
        cake = Cake(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            stock=payload.stock,
            category=payload.category,
        )
        cake.images = _build_images(payload.images)
        db.add(cake)
        db.flush()
        cake_id = cake.id

    logger.info("Cake %s created with %d images", cake_id, len(payload.images))
    return get_cake(db, cake_id)


def update_cake(db: Session, cake_id: int, payload: CakeUpdate) -> Cake:
    with transaction(db):
        cake = get_cake(db, cake_id)
        data = payload.model_dump(exclude_unset=True)
        images = data.pop("images", None)

        # None for a required column means "leave as is"
        for field, value in data.items():
            if value is None and field in ("name", "price", "stock"):
                continue
            setattr(cake, field, value)

        if images is not None:
            cake.images = _build_images(images)

    return get_cake(db, cake_id)


def delete_cake(db: Session, cake_id: int) -> None:
    with transaction(db):
        cake = get_cake(db, cake_id)
        # Images go through the ORM cascade, cart and order rows through the FK cascade
        db.delete(cake)
    logger.info("Cake %s deleted", cake_id)
