# module shop.carts.views
"""Endpoints du panier (utilisateur authentifié): lecture, ajout, quantité, suppression."""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from shop.dependencies import get_cart_service
from shop.utils.security import require_user
from .service import CartService

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])


class AddItemRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


@router.get("")
def get_cart(user: Dict[str, Any] = Depends(require_user), service: CartService = Depends(get_cart_service)):
    return service.get_cart(int(user["id"]))

@router.post("/items", status_code=201)
def add_item(
    body: AddItemRequest,
    user: Dict[str, Any] = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    return service.add_to_cart(int(user["id"]), body.product_id, body.quantity)

@router.patch("/items/{item_id}")
def update_item(
    item_id: int,
    body: UpdateQuantityRequest,
    user: Dict[str, Any] = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    item = service.update_cart_item_quantity(int(user["id"]), item_id, body.quantity)
    if not item:
        raise HTTPException(status_code=404, detail="Article introuvable dans le panier")
    return item

@router.delete("/items/{item_id}")
def remove_item(
    item_id: int,
    user: Dict[str, Any] = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    if not service.remove_from_cart(int(user["id"]), item_id):
        raise HTTPException(status_code=404, detail="Article introuvable dans le panier")
    return {"status": "ok"}
