# tests/test_catalog_dashboard.py
from tailorcraft.db.seed import seed_demo_data


def test_products_snapshot(client):
    resp = client.get("/api/products")

    assert resp.status_code == 200
    products = {p["id"]: p for p in resp.json()}
    assert set(products) == {"p1", "p2", "p3", "p4", "p5"}
    assert products["p2"]["price"] == 85
    assert sorted(products["p1"]["fabrics"]) == ["f1", "f3"]
    assert products["p4"]["isCustomizable"] is False
    assert products["p4"]["fabrics"] == []


def test_single_product(client):
    assert client.get("/api/products/p5").json()["category"] == "Blazers"
    assert client.get("/api/products/p404").status_code == 404


def test_fabrics(client):
    fabrics = client.get("/api/fabrics").json()
    assert [(f["id"], f["pricePerMeter"]) for f in fabrics] == [("f1", 50), ("f2", 30), ("f3", 35)]


def test_seed_is_idempotent(db):
    assert seed_demo_data(db) is False


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json()["status"] == "healthy"


def test_dashboard_requires_admin(client, customer_headers, worker_headers):
    assert client.get("/api/admin/dashboard").status_code == 401
    assert client.get("/api/admin/dashboard", headers=customer_headers).status_code == 403
    assert client.get("/api/admin/workers", headers=worker_headers).status_code == 403


def test_dashboard_and_worker_load(client, admin_headers, customer_headers):
    def place(items):
        return client.post("/api/orders", json={"items": items}, headers=customer_headers).json()["orderId"]

    shirt = place([{"productId": "p2", "quantity": 2, "selectedSize": "M"}])
    suit = place([{"productId": "p1", "quantity": 1, "selectedFabricId": "f1", "measurements": {"chest": 42}}])
    place([{"productId": "p4", "quantity": 1, "selectedSize": "ONE"}])

    for order_id in (shirt, suit):
        client.patch(f"/api/orders/{order_id}/status", json={"status": "CONFIRMED"}, headers=admin_headers)
        client.post(f"/api/orders/{order_id}/assign-worker", json={"workerId": "w2"}, headers=admin_headers)

    summary = client.get("/api/admin/dashboard", headers=admin_headers).json()
    assert summary["totalRevenue"] == 170 + 500 + 45
    assert summary["activeOrders"] == 3
    assert summary["pendingProduction"] == 2
    assert summary["totalCustomers"] == 2
    assert summary["ordersByStatus"]["PENDING"] == 1
    assert summary["ordersByStatus"]["CONFIRMED"] == 2
    assert summary["ordersByStatus"]["DELIVERED"] == 0

    workers = {w["id"]: w for w in client.get("/api/admin/workers", headers=admin_headers).json()}
    assert workers["w2"]["activeOrders"] == 2
    assert workers["w1"]["activeOrders"] == 0
    assert workers["w2"]["specialty"] == "TAILOR"
