"""
Registre central des routers.
- API v1: carts, orders, payments (checkout + webhook)
- Retour Stripe: /api/checkout
- Health: health_router
"""
from fastapi import FastAPI
from shop.carts import views as carts_views
from shop.orders import views as orders_views
from shop.payments import views as payments_views
from shop.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(carts_views.router)
    app.include_router(orders_views.router)
    app.include_router(payments_views.router)
    app.include_router(payments_views.return_router)
    app.include_router(health_router)
