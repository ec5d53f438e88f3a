import os

# Avant l'import de l'app: pas de Redis ni de clés réelles en tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from shop.app import app as fastapi_app
from shop.utils.security import require_user
from shop.payments.service import CheckoutService
from shop.urls.service import UrlService
from tests.fakes import TEST_USER, FakeGateway, InMemoryCartRepository, InMemoryOrderRepository

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    app.dependency_overrides[require_user] = lambda: dict(TEST_USER)
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

# Aucun accès Supabase réel
@pytest.fixture(autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("shop.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("shop.infra.supabase_client.get_service_supabase", lambda: MagicMock())

@pytest.fixture
def cart_repo() -> InMemoryCartRepository:
    return InMemoryCartRepository()

@pytest.fixture
def order_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()

@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()

@pytest.fixture
def url_service() -> UrlService:
    return UrlService(vercel_url="", base_url="https://shop.example.com")

@pytest.fixture
def checkout_service(cart_repo, order_repo, gateway, url_service) -> CheckoutService:
    return CheckoutService(cart_repo, order_repo, gateway, url_service, currency="jpy", tax_rate=Decimal("1.1"))

@pytest.fixture
def filled_cart(cart_repo):
    """Panier actif de TEST_USER: produit 1 (prix 1000) × 2."""
    cart_repo.add_product(1, "1000", name="Matcha", image_url="/images/matcha.png")
    cart = cart_repo.create(TEST_USER["id"])
    cart_repo.add_to_cart(cart.id, 1, 2)
    cart_repo.writes.clear()
    return cart
