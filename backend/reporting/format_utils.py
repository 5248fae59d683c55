"""Consistent formatting for contract values and dates. Never raise on bad input."""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Optional

PLACEHOLDER = "________________"

_NON_DIGITS = re.compile(r"\D")
_NON_NUMERIC = re.compile(r"[^\d,]")
# A minus before the first digit marks a negative amount ("-50,00", "R$ -50,00").
_LEADING_MINUS = re.compile(r"^[^\d]*-")


def _digits(raw: Any) -> str:
    if raw is None:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def currency_value(raw: Any) -> Optional[Decimal]:
    """
    Exact amount of a currency string, digits read as cents; None without digits.

    Built from the digit tuple so arbitrarily long input never overflows.
    """
    digits = _digits(raw)
    if not digits:
        return None
    negative = bool(_LEADING_MINUS.match(str(raw))) and digits.strip("0") != ""
    return Decimal((1 if negative else 0, tuple(int(c) for c in digits), -2))


def format_decimal_brl(value: float | Decimal) -> str:
    """1234.5 -> '1.234,50'."""
    text = f"{value:,.2f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency_input(raw: Any) -> str:
    """Form-state formatting: digits are cents. '100000' -> '1.000,00', '' -> ''."""
    value = currency_value(raw)
    if value is None:
        return ""
    return format_decimal_brl(value)


def format_currency(raw: Any) -> str:
    value = currency_value(raw)
    if value is None or value == 0:
        return PLACEHOLDER
    return f"R$ {format_decimal_brl(value)}"


def date_parts(iso_date: Any) -> tuple[str, str, str] | None:
    """Split 'YYYY-MM-DD' into (day, month, year); None unless exactly three parts."""
    text = str(iso_date or "").strip()
    if not text:
        return None
    parts = text.split("-")
    if len(parts) != 3 or not all(p.strip() for p in parts):
        return None
    year, month, day = (p.strip() for p in parts)
    return day, month, year


def format_date(iso_date: Any) -> str:
    parts = date_parts(iso_date)
    if parts is None:
        return PLACEHOLDER
    return "/".join(parts)


def parse_numeric_value(raw: Any) -> float:
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    clean = _NON_NUMERIC.sub("", str(raw)).replace(",", ".", 1)
    try:
        return float(clean)
    except ValueError:
        return 0.0


def or_placeholder(value: Any) -> str:
    text = str(value if value is not None else "").strip()
    return text or PLACEHOLDER
