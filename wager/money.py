"""Pence helpers. All amounts inside the engine are integer pence."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]


def to_decimal(value: Number) -> Decimal:
    # str() keeps 80.1 as 80.1 rather than its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_pence(value: Number) -> int:
    """Round to the nearest penny, halves away from zero."""
    return int(to_decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def pence_to_pounds(pence: int) -> Decimal:
    return Decimal(pence) / 100


def pounds_to_pence(pounds: Number) -> int:
    return round_pence(to_decimal(pounds) * 100)


def format_currency(pence: int) -> str:
    """e.g. 123456 -> "£1,234.56", -2500 -> "-£25.00"."""
    sign = "-" if pence < 0 else ""
    return f"{sign}£{pence_to_pounds(abs(pence)):,.2f}"


def format_mileage(miles: float) -> str:
    return f"{miles:.2f} mi"
