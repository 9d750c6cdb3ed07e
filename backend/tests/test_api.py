from fastapi.testclient import TestClient
import uvicorn

import main
from main import create_app
from models.audit_log import AuditLog
from models.users import User
from populate_db import seed, SAMPLE_CAKES


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json() == {"message": "Cake Shop API is running!"}


def test_unexpected_errors_are_hidden(database):
    app = create_app(database)

    @app.get("/boom")
    def boom():
        raise RuntimeError("connection string with password=hunter2")

    with TestClient(app, raise_server_exceptions=False) as c:
        res = c.get("/boom")

    assert res.status_code == 500
    assert res.json() == {"detail": "Something went wrong on the server"}


def test_run_serves_app_with_configured_address(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(main.settings, "HOST", "127.0.0.1")
    monkeypatch.setattr(main.settings, "PORT", 9001)

    main.run()

    assert calls == [("main:app", {"host": "127.0.0.1", "port": 9001})]


# --- auth guards ---

def test_protected_routes_require_token(client):
    assert client.get("/api/cart").status_code == 401
    assert client.post("/api/orders", json={"address": "123 Main Street"}).status_code == 401
    res = client.get("/api/admin/dashboard")
    assert res.status_code == 401
    assert res.json()["detail"] == "Not authorized - no token provided"


def test_invalid_token_is_rejected(client):
    res = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Not authorized - invalid token"


def test_admin_routes_forbid_customers(client, customer_headers):
    for path in ("/api/admin/dashboard", "/api/admin/orders", "/api/admin/customers", "/api/contact"):
        res = client.get(path, headers=customer_headers)
        assert res.status_code == 403, path
    res = client.post("/api/cakes", json={"name": "X", "price": "1.00"}, headers=customer_headers)
    assert res.status_code == 403


# --- catalog ---

def test_cake_crud(client, admin_headers):
    res = client.post(
        "/api/cakes",
        json={"name": "Black Forest", "price": "1500.00", "stock": 4, "category": "Chocolate",
              "images": ["/uploads/bf/1.jpg", "/uploads/bf/2.jpg"]},
        headers=admin_headers,
    )
    assert res.status_code == 201
    body = res.json()
    cake_id = body["cakeId"]
    assert body["cake"]["images"] == ["/uploads/bf/1.jpg", "/uploads/bf/2.jpg"]

    res = client.put(f"/api/cakes/{cake_id}", json={"stock": 9, "images": ["/uploads/bf/3.jpg"]},
                     headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["stock"] == 9
    assert res.json()["name"] == "Black Forest"
    assert res.json()["images"] == ["/uploads/bf/3.jpg"]

    listing = client.get("/api/cakes").json()
    assert [c["id"] for c in listing] == [cake_id]

    assert client.delete(f"/api/cakes/{cake_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/cakes/{cake_id}").status_code == 404


def test_create_cake_rejects_negative_price(client, admin_headers):
    res = client.post("/api/cakes", json={"name": "Bad", "price": "-1"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["detail"].startswith("price")


# --- cart ---

def test_cart_flow(client, customer_headers, make_cake):
    cake_id = make_cake(price="1000.00", stock=3)

    res = client.post("/api/cart", json={"cakeId": cake_id, "quantity": 2}, headers=customer_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Item added to cart successfully"
    assert body["cart"]["total"] == "2000.00"
    cart_id = body["cart"]["items"][0]["cart_id"]

    res = client.post("/api/cart", json={"cakeId": cake_id, "quantity": 2}, headers=customer_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Not enough stock available. Only 3 left (you already have 2 in cart)"

    res = client.put(f"/api/cart/{cart_id}", json={"quantity": 3}, headers=customer_headers)
    assert res.status_code == 200
    assert res.json()["cart"]["total"] == "3000.00"

    res = client.delete(f"/api/cart/{cart_id}", headers=customer_headers)
    assert res.json() == {"message": "Item removed from cart"}
    assert client.get("/api/cart", headers=customer_headers).json() == {"items": [], "total": "0.00"}

    assert client.delete("/api/cart", headers=customer_headers).json() == {"message": "Cart cleared"}


def test_cart_rejects_bad_input(client, customer_headers, make_cake):
    cake_id = make_cake(stock=3)

    res = client.post("/api/cart", json={"cakeId": cake_id, "quantity": 0}, headers=customer_headers)
    assert res.status_code == 400
    res = client.post("/api/cart", json={"quantity": 1}, headers=customer_headers)
    assert res.status_code == 400
    res = client.post("/api/cart", json={"cakeId": 999}, headers=customer_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "Cake not found"
    res = client.put("/api/cart/999", json={"quantity": 1}, headers=customer_headers)
    assert res.status_code == 404


# --- orders ---

def test_checkout_and_history(client, db, customer, customer_headers, make_cake, stock_of):
    cake_id = make_cake(price="1000.00", stock=3)
    client.post("/api/cart", json={"cakeId": cake_id, "quantity": 2}, headers=customer_headers)

    res = client.post("/api/orders", json={"address": "  123 Main Street "}, headers=customer_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["message"] == "Order created successfully"
    assert created["totalAmount"] == "2000.00"
    assert created["paymentMethod"] == "COD"
    assert created["address"] == "123 Main Street"
    assert created["itemCount"] == 1
    order_id = created["orderId"]
    assert stock_of(cake_id) == 1

    orders = client.get("/api/orders", headers=customer_headers).json()["orders"]
    assert [o["id"] for o in orders] == [order_id]
    assert orders[0]["item_count"] == 1

    detail = client.get(f"/api/orders/{order_id}", headers=customer_headers).json()["order"]
    assert detail["items"][0]["price_at_purchase"] == "1000.00"
    assert detail["items"][0]["quantity"] == 2

    res = client.put(f"/api/orders/{order_id}/cancel", headers=customer_headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Order cancelled successfully", "orderId": order_id}
    assert stock_of(cake_id) == 3

    res = client.put(f"/api/orders/{order_id}/cancel", headers=customer_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Cannot cancel order with status: cancelled"

    actions = [(l.action, l.status) for l in db.query(AuditLog).order_by(AuditLog.id).all()]
    assert ("ORDER_CREATE", "SUCCESS") in actions
    assert ("ORDER_CANCEL", "SUCCESS") in actions


def test_checkout_failures(client, db, customer_headers, make_cake):
    res = client.post("/api/orders", json={"address": "123 Main Street"}, headers=customer_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Cart is empty"

    cake_id = make_cake(stock=3)
    client.post("/api/cart", json={"cakeId": cake_id}, headers=customer_headers)
    res = client.post("/api/orders", json={"address": "abc"}, headers=customer_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Delivery address is required and must be at least 5 characters"

    fails = db.query(AuditLog).filter(AuditLog.action == "ORDER_CREATE", AuditLog.status == "FAIL").count()
    assert fails == 2


def test_orders_of_other_users_are_hidden(client, make_user, make_cake, make_order, headers_for):
    owner = make_user("alice")
    other = make_user("bob")
    order_id = make_order(owner.id, [(make_cake(), 1, "10.00")])

    res = client.get(f"/api/orders/{order_id}", headers=headers_for(other))
    assert res.status_code == 404
    assert res.json()["detail"] == "Order not found or not yours"


def test_reorder(client, customer, customer_headers, make_cake, make_order, cart_rows):
    a = make_cake(name="A", stock=5)
    b = make_cake(name="B", stock=0)
    order_id = make_order(customer.id, [(a, 2, "10.00"), (b, 1, "10.00")], status="completed")

    res = client.post(f"/api/orders/{order_id}/reorder", headers=customer_headers)
    assert res.status_code == 200
    assert res.json() == {
        "message": "Items added to cart",
        "addedItems": 1,
        "unavailableItems": [{"name": "B", "requested": 1, "available": 0}],
        "success": True,
    }
    assert cart_rows(customer.id) == {a: 2}


# --- admin ---

def test_admin_dashboard_and_status(client, customer, admin_headers, make_cake, make_order, stock_of):
    cake_id = make_cake(stock=1)
    order_id = make_order(customer.id, [(cake_id, 2, "10.00")])

    stats = client.get("/api/admin/dashboard", headers=admin_headers).json()
    assert stats["totalOrders"] == 1
    assert stats["pendingOrders"] == 1
    assert stats["totalCustomers"] == 1
    assert stats["recentOrders"][0]["customerName"] == "alice"

    res = client.put(f"/api/admin/orders/{order_id}/status", json={"status": "completed"}, headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Order status updated successfully", "status": "completed"}

    stats = client.get("/api/admin/dashboard", headers=admin_headers).json()
    assert stats["totalRevenue"] == "20.00"
    assert stats["completedOrders"] == 1

    res = client.put(f"/api/admin/orders/{order_id}/status", json={"status": "shipped"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid status"

    res = client.put("/api/admin/orders/999/status", json={"status": "completed"}, headers=admin_headers)
    assert res.status_code == 404

    customers = client.get("/api/admin/customers", headers=admin_headers).json()["customers"]
    assert [c["username"] for c in customers] == ["alice"]
    assert customers[0]["total_spent"] == "20.00"

    detail = client.get(f"/api/admin/orders/{order_id}", headers=admin_headers).json()
    assert detail["customer_email"] == "alice@example.com"
    assert stock_of(cake_id) == 1


# --- contact ---

def test_contact_messages(client, admin_headers):
    res = client.post("/api/contact", json={
        "name": "Jane", "email": "jane@example.com", "subject": "Wedding cake", "message": "Do you deliver?",
    })
    assert res.status_code == 201
    message_id = res.json()["messageId"]

    messages = client.get("/api/contact", headers=admin_headers).json()["messages"]
    assert [(m["id"], m["status"]) for m in messages] == [(message_id, "unread")]

    assert client.put(f"/api/contact/{message_id}/read", headers=admin_headers).status_code == 200
    messages = client.get("/api/contact", headers=admin_headers).json()["messages"]
    assert messages[0]["status"] == "read"

    assert client.delete(f"/api/contact/{message_id}", headers=admin_headers).status_code == 200
    res = client.delete(f"/api/contact/{message_id}", headers=admin_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "Message not found"


def test_contact_rejects_bad_email(client):
    res = client.post("/api/contact", json={
        "name": "Jane", "email": "not-an-email", "subject": "Hi", "message": "Hello",
    })
    assert res.status_code == 400


# --- seed ---

def test_seed_is_idempotent(client, db):
    first = seed(db)
    assert first == {"admin": True, "cakes": len(SAMPLE_CAKES)}
    assert seed(db) == {"admin": False, "cakes": 0}

    assert db.query(User).filter(User.role == "admin").count() == 1
    cakes = client.get("/api/cakes").json()
    assert len(cakes) == len(SAMPLE_CAKES)
    assert all(len(c["images"]) == 1 for c in cakes)
