"""
Câblage explicite des services (injection par constructeur), exposé comme dépendances FastAPI.
Les tests remplacent ces fournisseurs via app.dependency_overrides.
"""
from fastapi import Depends

from shop.carts.repository import CartRepository
from shop.carts.service import CartService
from shop.orders.repository import OrderRepository
from shop.orders.service import OrderService
from shop.payments.gateway import StripeGateway
from shop.payments.service import CheckoutService
from shop.urls.service import UrlService


def get_cart_repository() -> CartRepository:
    return CartRepository()


def get_order_repository() -> OrderRepository:
    return OrderRepository()


def get_url_service() -> UrlService:
    return UrlService()


def get_cart_service(cart_repository: CartRepository = Depends(get_cart_repository)) -> CartService:
    return CartService(cart_repository)


def get_order_service(order_repository: OrderRepository = Depends(get_order_repository)) -> OrderService:
    return OrderService(order_repository)


def get_checkout_service(
    cart_repository: CartRepository = Depends(get_cart_repository),
    order_repository: OrderRepository = Depends(get_order_repository),
    url_service: UrlService = Depends(get_url_service),
) -> CheckoutService:
    return CheckoutService(
        cart_repository,
        order_repository,
        StripeGateway(url_service),
        url_service,
    )
