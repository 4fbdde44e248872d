# helpers.py
# Cent conversion & money rounding

from typing import Optional, Union
from decimal import Decimal, ROUND_HALF_UP
import logging

from config import CENTS_PER_UNIT, CURRENCY_SYMBOL

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
_UNIT = Decimal("1")

Amount = Union[float, int, Decimal]

def to_cents(value: Optional[Amount]) -> int:
    """
    Convert a currency amount to integer cents.
    Rounds half up on the decimal representation, so 0.125 -> 13 and
    1.005 -> 101; rounding the binary float product would give 100.
    """
    if value is None:
        return 0
    cents = Decimal(str(value)) * CENTS_PER_UNIT
    return int(cents.quantize(_UNIT, rounding=ROUND_HALF_UP))

def cents_to_amount(cents: int) -> float:
    """Convert integer cents back to a currency amount."""
    return float(Decimal(cents) / CENTS_PER_UNIT)

def round_money(value: Amount) -> float:
    """Round to 2 decimal places, half up."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))

def format_money(value: Amount) -> str:
    return f"{CURRENCY_SYMBOL}{round_money(value):,.2f}"
