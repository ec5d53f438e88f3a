# module shop.money
"""
Montants de la boutique.
- Stockage: chaînes décimales (colonnes numeric), jamais de float.
- Stripe: entiers en unités mineures (yen), taxe forfaitaire appliquée uniquement à cette frontière.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any, Iterable, Tuple

from pydantic import BeforeValidator


def _as_money_str(v: Any) -> Any:
    # PostgREST renvoie les colonnes numeric comme des nombres JSON
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return str(v)
    return v


MoneyStr = Annotated[str, BeforeValidator(_as_money_str)]


def to_decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def subtotal(lines: Iterable[Tuple[Any, int]]) -> Decimal:
    """Somme exacte de prix × quantité sur des couples (prix, quantité)."""
    return sum((to_decimal(price) * qty for price, qty in lines), Decimal("0"))


def unit_amount_with_tax(price: Any, tax_rate: Decimal) -> int:
    """
    Montant unitaire Stripe TTC: round(prix × taux), arrondi commercial (0.5 vers le haut),
    calculé en décimal exact pour éviter les artefacts de float.
    """
    return int((to_decimal(price) * tax_rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
