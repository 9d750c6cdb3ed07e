"""
Pytest configuration and fixtures for the Cake Shop API tests.
"""
import os
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

# Keep test runs independent of a developer's .env
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-unit-tests-only")

from database import Database
from main import create_app
from models.users import User
from models.cake import Cake, CakeImage
from models.cart import CartItem
from models.order import Order, OrderItem
from utils.hashing import get_password_hash
from utils.tokenJWT import token_for


@pytest.fixture
def database(tmp_path):
    """File-backed SQLite so the app and the test use separate connections."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(database):
    with TestClient(create_app(database)) as c:
        yield c


@pytest.fixture
def make_user(database):
    def _make(username="alice", email=None, password="secret123", role="customer"):
        session = database.session()
        try:
            user = User(
                username=username,
                email=email or f"{username}@example.com",
                password_hash=get_password_hash(password),
                role=role,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
        finally:
            session.close()
    return _make


@pytest.fixture
def make_cake(database):
    def _make(name="Chocolate Cake", price="1000.00", stock=3, category="Chocolate", images=None):
        session = database.session()
        try:
            cake = Cake(name=name, price=Decimal(price), stock=stock, category=category,
                        description=f"{name} description")
            cake.images = [CakeImage(image_url=url, is_primary=(i == 0)) for i, url in enumerate(images or [])]
            session.add(cake)
            session.commit()
            return cake.id
        finally:
            session.close()
    return _make


@pytest.fixture
def make_order(database):
    """Insert an order directly, bypassing checkout. lines: [(cake_id, quantity, price)]."""
    def _make(user_id, lines, status="pending", address="123 Main Street"):
        session = database.session()
        try:
            total = sum(Decimal(price) * qty for _, qty, price in lines)
            order = Order(user_id=user_id, total_amount=total, status=status, payment_method="COD", address=address)
            order.items = [OrderItem(cake_id=c, quantity=q, price_at_purchase=Decimal(p)) for c, q, p in lines]
            session.add(order)
            session.commit()
            return order.id
        finally:
            session.close()
    return _make


@pytest.fixture
def stock_of(database):
    def _stock(cake_id):
        session = database.session()
        try:
            return session.query(Cake.stock).filter(Cake.id == cake_id).scalar()
        finally:
            session.close()
    return _stock


@pytest.fixture
def cart_rows(database):
    def _rows(user_id):
        session = database.session()
        try:
            rows = session.query(CartItem.cake_id, CartItem.quantity).filter(CartItem.user_id == user_id).all()
            return {cake_id: qty for cake_id, qty in rows}
        finally:
            session.close()
    return _rows


@pytest.fixture
def customer(make_user):
    return make_user("alice")


@pytest.fixture
def admin(make_user):
    return make_user("boss", role="admin")


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {token_for(user)}"}
    return _headers


@pytest.fixture
def customer_headers(customer, headers_for):
    return headers_for(customer)


@pytest.fixture
def admin_headers(admin, headers_for):
    return headers_for(admin)
