"""
Construction des line_items Stripe (pas de Stripe, pas de DB).
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping
import logging

from shop.carts.models import ProductSnapshot
from shop.orders.models import OrderItem
from shop.urls.service import UrlService
from shop.money import unit_amount_with_tax

logger = logging.getLogger(__name__)

# module shop.payments.line_items
def to_line_items(
    order_items: Iterable[OrderItem],
    products_by_id: Mapping[int, ProductSnapshot],
    url_service: UrlService,
    tax_rate: Decimal,
) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe à partir des lignes de commande figées.
    - unit_amount = round(prix figé × tax_rate), en unités mineures (yen), arrondi 0.5 vers le haut.
      La taxe n'existe qu'ici: total_amount de la commande reste hors taxe.
    - product_data.name/description viennent du produit joint au panier.
    - images: URL absolue uniquement; une image non résolvable est omise (jamais d'erreur).
    """
    line_items: List[Dict[str, Any]] = []
    for item in order_items:
        product = products_by_id.get(item.product_id)
        product_data: Dict[str, Any] = {"name": product.name if product else f"Produit {item.product_id}"}
        if product and product.description:
            product_data["description"] = product.description
        image = url_service.get_full_image_url(product.image_url) if product else None
        if image:
            product_data["images"] = [image]
        elif product and product.image_url:
            logger.info("payments.line_items image omitted product_id=%s", item.product_id)

        line_items.append({
            "quantity": item.quantity,
            "price_data": {
                "currency": item.currency.lower(),
                "unit_amount": unit_amount_with_tax(item.price, tax_rate),
                "product_data": product_data,
            },
        })
    return line_items
