from __future__ import annotations

from _client_utils import ADMIN_IP, OUTSIDER_IP, make_app, remote_client


def _seed(c):
    c.post("/api/content", json={"page": "home", "changes": {"title": "Hi"}})
    c.post("/api/content", json={"page": "faq", "changes": {"q": "?"}})
    c.post("/api/products", json={"productId": "p1", "productData": {"name": "Bead A", "price": 9.99}})


def test_reset_denied_for_outsider_leaves_data(admin_client, outsider_client):
    _seed(admin_client)
    r = outsider_client.post("/api/reset", json={"type": "all"})
    assert r.status_code == 403
    body = r.get_json()
    assert body["error"] == "Access denied"
    assert body["ip"] == OUTSIDER_IP
    assert len(admin_client.get("/api/content").get_json()) == 2
    assert len(admin_client.get("/api/products").get_json()) == 1


def test_reset_all(admin_client):
    _seed(admin_client)
    r = admin_client.post("/api/reset", json={"type": "all"})
    assert r.status_code == 200
    assert r.get_json() == {"success": True, "reset": "all"}
    assert admin_client.get("/api/content").get_json() == {}
    assert admin_client.get("/api/products").get_json() == {}


def test_reset_single_collection(admin_client):
    _seed(admin_client)
    r = admin_client.post("/api/reset", json={"type": "products"})
    assert r.status_code == 200
    assert admin_client.get("/api/products").get_json() == {}
    assert len(admin_client.get("/api/content").get_json()) == 2


def test_reset_invalid_type(admin_client):
    _seed(admin_client)
    r = admin_client.post("/api/reset", json={"type": "orders"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "Invalid reset type"
    r = admin_client.post("/api/reset", json={})
    assert r.status_code == 400


def test_admin_info(admin_client):
    _seed(admin_client)
    r = admin_client.get("/api/admin/info")
    assert r.status_code == 200
    info = r.get_json()
    assert info["contentPages"] == 2
    assert info["totalProducts"] == 1
    assert info["lastActivity"].endswith("Z")
    assert isinstance(info["serverUptime"], (int, float))
    assert info["adminIPs"] == [ADMIN_IP]


def test_admin_info_hides_allowlist_when_disabled(data_dir):
    app = make_app(data_dir, admin_info_exposes_ips=False)
    info = remote_client(app, ADMIN_IP).get("/api/admin/info").get_json()
    assert "adminIPs" not in info
    assert info["contentPages"] == 0


def test_admin_info_denied_for_outsider(outsider_client):
    assert outsider_client.get("/api/admin/info").status_code == 403
