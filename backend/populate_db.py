import os
import sys
from decimal import Decimal

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from sqlalchemy.orm import Session

from config import settings
from database import Database, transaction
from models.users import User
from models.cake import Cake, CakeImage
from utils.hashing import get_password_hash

# Starter catalog: (name, category, price, stock, description)
SAMPLE_CAKES = [
    ("Chocolate Cake", "Chocolate", Decimal("1000.00"), 10, "Rich dark chocolate sponge with ganache."),
    ("Red Velvet", "Classic", Decimal("1200.00"), 8, "Buttermilk red velvet with cream cheese frosting."),
    ("Vanilla Sponge", "Classic", Decimal("800.00"), 12, "Light vanilla sponge layered with fresh cream."),
    ("Black Forest", "Chocolate", Decimal("1500.00"), 5, "Cherries, chocolate and whipped cream."),
    ("Lemon Drizzle", "Fruit", Decimal("900.00"), 6, "Zesty lemon loaf with sugar glaze."),
]


def seed(db: Session) -> dict:
    """Create the admin account and the starter catalog if they are missing."""
    created = {"admin": False, "cakes": 0}

    with transaction(db):
        admin_user = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
        if not admin_user:
            db.add(User(
                username=settings.ADMIN_USERNAME,
                email=settings.ADMIN_EMAIL,
                password_hash=get_password_hash(settings.ADMIN_PASSWORD),
                role="admin",
            ))
            created["admin"] = True

        existing = {name for (name,) in db.query(Cake.name).all()}
        for name, category, price, stock, description in SAMPLE_CAKES:
            if name in existing:
                continue
            slug = name.lower().replace(" ", "-")
            cake = Cake(name=name, category=category, price=price, stock=stock, description=description)
            cake.images = [CakeImage(image_url=f"/uploads/{slug}/{slug}.jpg", is_primary=True)]
            db.add(cake)
            created["cakes"] += 1

    return created


def populate_database():
    """Main execution function to populate database."""
    database = Database(settings.DATABASE_URL)
    database.create_all()
    session = database.session()
    try:
        created = seed(session)
    finally:
        session.close()
        database.dispose()

    if created["admin"]:
        print(f"Admin account created: {settings.ADMIN_EMAIL}")
    print(f"Inserted {created['cakes']} cakes.")


if __name__ == "__main__":
    populate_database()
