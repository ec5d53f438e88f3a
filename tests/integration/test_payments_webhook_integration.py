import pytest
import stripe

from shop.dependencies import get_checkout_service
from shop.orders.models import OrderStatus
from shop.payments.exceptions import CheckoutRedirect


@pytest.fixture
def api(app, client, checkout_service):
    app.dependency_overrides[get_checkout_service] = lambda: checkout_service
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_checkout_service, None)

@pytest.fixture
def pending_order(checkout_service, filled_cart, order_repo):
    with pytest.raises(CheckoutRedirect):
        checkout_service.process_checkout(7)
    return next(iter(order_repo.orders.values()))

def _stub_event(monkeypatch, event):
    async def fake_parse_event(request):
        return event
    monkeypatch.setattr("shop.payments.views.stripe_client.parse_event", fake_parse_event)


def test_webhook_invalid_signature_400(api, monkeypatch):
    async def bad(request):
        raise stripe.SignatureVerificationError("bad sig", "t=1,v1=bad")
    monkeypatch.setattr("shop.payments.views.stripe_client.parse_event", bad)

    r = api.post("/api/v1/payments/webhook", content=b"{}", headers={"stripe-signature": "t=1,v1=bad"})

    assert r.status_code == 400
    assert r.json() == {"error": "Webhook signature verification failed."}

def test_webhook_invalid_payload_400(api, monkeypatch):
    async def bad(request):
        raise ValueError("Invalid payload")
    monkeypatch.setattr("shop.payments.views.stripe_client.parse_event", bad)
    r = api.post("/api/v1/payments/webhook", content=b"not json")
    assert r.status_code == 400

def test_webhook_completed_marks_paid(api, pending_order, gateway, order_repo, cart_repo, monkeypatch):
    session = gateway.mark_paid(pending_order.stripe_session_id, payment_intent="pi_9")
    _stub_event(monkeypatch, {"type": "checkout.session.completed", "data": {"object": session}})

    r = api.post("/api/v1/payments/webhook", content=b"{}")

    assert r.status_code == 200
    assert r.json() == {"received": True, "status": "ok", "type": "checkout.session.completed"}
    order = order_repo.find_by_id(pending_order.id)
    assert order.status == OrderStatus.PAID
    assert order.stripe_payment_intent_id == "pi_9"
    assert cart_repo.find_active_cart_by_user_id(7) is None

def test_webhook_delivered_twice_is_idempotent(api, pending_order, gateway, order_repo, cart_repo, monkeypatch):
    session = gateway.mark_paid(pending_order.stripe_session_id)
    _stub_event(monkeypatch, {"type": "checkout.session.completed", "data": {"object": session}})

    for _ in range(2):
        assert api.post("/api/v1/payments/webhook", content=b"{}").status_code == 200

    assert order_repo.find_by_id(pending_order.id).status == OrderStatus.PAID
    assert cart_repo.writes.count("carts.clear") == 1

def test_webhook_expired_marks_failed(api, pending_order, gateway, order_repo, cart_repo, monkeypatch):
    session = gateway.sessions[pending_order.stripe_session_id]
    _stub_event(monkeypatch, {"type": "checkout.session.expired", "data": {"object": session}})

    r = api.post("/api/v1/payments/webhook", content=b"{}")

    assert r.status_code == 200
    assert order_repo.find_by_id(pending_order.id).status == OrderStatus.FAILED
    assert cart_repo.find_active_cart_by_user_id(7) is not None

def test_webhook_unhandled_type_acknowledged(api, monkeypatch):
    _stub_event(monkeypatch, {"type": "customer.created", "data": {"object": {}}})
    r = api.post("/api/v1/payments/webhook", content=b"{}")
    assert r.status_code == 200
    assert r.json()["status"] == "ignored"

def test_webhook_missing_order_id_500(api, monkeypatch):
    _stub_event(monkeypatch, {"type": "checkout.session.expired", "data": {"object": {"id": "cs_1", "metadata": {}}}})
    r = api.post("/api/v1/payments/webhook", content=b"{}")
    assert r.status_code == 500
    assert r.json() == {"error": "Error processing webhook."}
