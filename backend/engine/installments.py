from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Optional

from models import ONE_TIME_PAYMENT_METHODS, IndividualRecord, OrganizationRecord, PaymentMethod
from reporting.format_utils import currency_value, format_decimal_brl

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class InstallmentQuote:
    base: float
    count: int
    amount: float
    formatted: str


def is_one_time_payment(method: Any) -> bool:
    text = str(method or "").strip().upper()
    return any(text == m.value for m in ONE_TIME_PAYMENT_METHODS)


def installment_base(total: Decimal, down_payment: Decimal, method: Any) -> Decimal:
    """
    Amount split across installments.

    One-time methods (card, cash, PIX) charge the total; the down payment is
    ignored. Every other method splits what remains after the down payment.
    """
    if is_one_time_payment(method):
        return total
    return total - down_payment


def _parse_count(raw: Any) -> Optional[int]:
    text = str(raw if raw is not None else "").strip()
    if not text:
        return None
    try:
        count = int(text)
    except ValueError:
        return None
    return count if count > 0 else None


def compute_installment(
    total_raw: Any,
    down_payment_raw: Any,
    count_raw: Any,
    method: Any = PaymentMethod.BOLETO.value,
) -> Optional[InstallmentQuote]:
    """
    Per-installment quote, or None when any input is missing or the count is
    not a positive integer. Currency inputs follow the form convention:
    digits are cents, so "100000" and "1.000,00" both mean 1000.00.
    """
    total = currency_value(total_raw)
    down_payment = currency_value(down_payment_raw)
    if total is None or down_payment is None:
        return None
    count = _parse_count(count_raw)
    if count is None:
        return None
    with localcontext() as ctx:
        # Room for every digit of both amounts so nothing is rounded before the cents.
        ctx.prec = max(ctx.prec, len(total.as_tuple().digits) + len(down_payment.as_tuple().digits) + 4)
        base = installment_base(total, down_payment, method)
        amount = (base / Decimal(count)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return InstallmentQuote(
        base=float(base),
        count=count,
        amount=float(amount),
        formatted=format_decimal_brl(amount),
    )


def apply_installment(record):
    """
    Return the record with installment_amount derived from its terms.

    When the terms are incomplete the record comes back unchanged, keeping
    whatever installment amount it already had.
    """
    if not isinstance(record, (IndividualRecord, OrganizationRecord)):
        return record
    quote = compute_installment(
        record.total_value,
        record.down_payment,
        record.installment_count,
        record.payment_method,
    )
    if quote is None or quote.formatted == record.installment_amount:
        return record
    return record.model_copy(update={"installment_amount": quote.formatted})
