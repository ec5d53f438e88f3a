from decimal import Decimal

import pytest

from shop.money import subtotal, to_decimal, unit_amount_with_tax


def test_subtotal_exact_decimal():
    assert subtotal([("1000", 2), ("0.10", 3)]) == Decimal("2000.30")

def test_subtotal_empty_is_zero():
    assert subtotal([]) == Decimal("0")

def test_to_decimal_accepts_numbers_and_strings():
    assert to_decimal(1000) == Decimal("1000")
    assert to_decimal("12.50") == Decimal("12.50")
    # pas d'artefact binaire
    assert to_decimal(0.1) == Decimal("0.1")

@pytest.mark.parametrize(
    "price,expected",
    [
        ("1000", 1100),
        ("15", 17),      # 16.5 -> arrondi vers le haut
        ("5", 6),        # 5.5
        ("1005", 1106),  # 1105.5
        ("999", 1099),   # 1098.9
        ("0", 0),
    ],
)
def test_unit_amount_with_tax_half_up(price, expected):
    assert unit_amount_with_tax(price, Decimal("1.1")) == expected

def test_unit_amount_is_int():
    assert isinstance(unit_amount_with_tax("1000", Decimal("1.1")), int)
