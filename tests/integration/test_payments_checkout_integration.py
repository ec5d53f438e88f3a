import pytest

from shop.dependencies import get_checkout_service
from shop.orders.models import OrderStatus
from shop.payments.exceptions import SessionCreationFailed


@pytest.fixture
def api(app, client, checkout_service):
    app.dependency_overrides[get_checkout_service] = lambda: checkout_service
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_checkout_service, None)


def test_checkout_redirects_303(api, filled_cart, gateway):
    r = api.post("/api/v1/checkout", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == gateway.url

def test_checkout_json_client_gets_url(api, filled_cart, gateway, order_repo):
    r = api.post(
        "/api/v1/checkout",
        json={"shipping_address": "1-1 Chiyoda, Tokyo"},
        headers={"Accept": "application/json"},
    )
    assert r.status_code == 200
    assert r.json() == {"url": gateway.url}
    order = next(iter(order_repo.orders.values()))
    assert order.shipping_address == "1-1 Chiyoda, Tokyo"

def test_checkout_without_cart_404(api):
    r = api.post("/api/v1/checkout")
    assert r.status_code == 404
    assert r.json()["code"] == "cart_not_found"

def test_checkout_empty_cart_400(api, cart_repo):
    cart_repo.create(7)
    r = api.post("/api/v1/checkout")
    assert r.status_code == 400
    assert r.json()["code"] == "empty_cart"

def test_checkout_session_failure_502(api, filled_cart, gateway, monkeypatch):
    def boom(**kw):
        raise SessionCreationFailed()
    monkeypatch.setattr(gateway, "create_checkout_session", boom)
    r = api.post("/api/v1/checkout")
    assert r.status_code == 502
    assert r.json()["code"] == "session_creation_failed"

def test_checkout_url_unavailable_502(api, filled_cart, gateway):
    gateway.url = None
    r = api.post("/api/v1/checkout")
    assert r.status_code == 502
    assert r.json()["code"] == "checkout_url_unavailable"

def test_checkout_requires_auth(app, client):
    # sans override: ni Bearer ni cookie
    from shop.utils.security import require_user
    app.dependency_overrides.pop(require_user, None)
    r = client.post("/api/v1/checkout")
    assert r.status_code == 401

# ---- retour Stripe ----

def test_return_without_session_id(api):
    r = api.get("/api/checkout", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/cart"

def test_return_paid_redirects_to_order(api, filled_cart, gateway, order_repo, cart_repo):
    api.post("/api/v1/checkout", follow_redirects=False)
    order = next(iter(order_repo.orders.values()))
    gateway.mark_paid(order.stripe_session_id)

    r = api.get(f"/api/checkout?session_id={order.stripe_session_id}", follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"] == f"/orders/{order.id}"
    assert order_repo.find_by_id(order.id).status == OrderStatus.PAID
    assert cart_repo.find_active_cart_by_user_id(7) is None

def test_return_unknown_session_goes_to_error(api, gateway):
    gateway.sessions["cs_other"] = {"id": "cs_other", "payment_status": "paid", "metadata": {"orderId": "1"}}
    r = api.get("/api/checkout?session_id=cs_other", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/error"
