from datetime import timedelta

from models.audit_log import AuditLog
from models.users import User
from utils.tokenJWT import create_access_token


def register(client, username="carol", email="carol@example.com", password="secret123"):
    return client.post("/api/auth/register", json={"username": username, "email": email, "password": password})


def test_register_issues_token_for_customer(client, db):
    res = register(client, email="Carol@Example.com")
    assert res.status_code == 201
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "carol"
    assert body["user"]["email"] == "carol@example.com"
    assert body["user"]["role"] == "customer"
    assert "password_hash" not in body["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == body["user"]["id"]

    assert db.query(AuditLog).filter(AuditLog.action == "REGISTER", AuditLog.status == "SUCCESS").count() == 1


def test_register_duplicate(client):
    assert register(client).status_code == 201

    res = register(client, username="someone-else")
    assert res.status_code == 400
    assert res.json()["detail"] == "User with this email or username already exists"

    res = register(client, email="other@example.com")
    assert res.status_code == 400


def test_register_validates_input(client):
    assert register(client, password="123").status_code == 400
    assert register(client, username="ab").status_code == 400
    assert register(client, email="nope").status_code == 400


def test_login(client, customer):
    res = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": "secret123"})
    assert res.status_code == 200
    assert res.json()["user"]["id"] == customer.id

    res = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid credentials"

    res = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert res.status_code == 401


def test_expired_token_is_rejected(client, customer):
    token = create_access_token(
        {"sub": customer.email, "id": customer.id, "role": customer.role},
        expires_delta=timedelta(minutes=-1),
    )
    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_token_for_deleted_user_is_rejected(client, customer, customer_headers, db):
    db.query(User).filter(User.id == customer.id).delete()
    db.commit()

    res = client.get("/api/auth/me", headers=customer_headers)
    assert res.status_code == 401
