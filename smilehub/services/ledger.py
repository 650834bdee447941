"""Patient financial ledger.

Pure functions over a treatment fee and a payment list. Payments may be
objects with an ``amount`` attribute or mappings with an ``amount`` key,
so both stored JSON rows and request models can be summarized.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

ZERO = Decimal("0")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    # str() keeps floats like 0.1 from turning into binary noise
    return Decimal(str(value))


def _amount_of(payment: Any) -> Decimal:
    if isinstance(payment, Mapping):
        return _to_decimal(payment.get("amount"))
    return _to_decimal(getattr(payment, "amount", None))


def total_paid(payments: Iterable[Any] | None) -> Decimal:
    """Sum of all payment amounts (order independent)."""
    return sum((_amount_of(p) for p in payments or ()), ZERO)


def due_amount(total_fee: Any, payments: Iterable[Any] | None) -> Decimal:
    """Outstanding balance, never below zero."""
    return max(ZERO, _to_decimal(total_fee) - total_paid(payments))


@dataclass(frozen=True)
class Ledger:
    """Financial summary of one patient."""

    total_fee: Decimal
    total_paid: Decimal
    due_amount: Decimal

    @property
    def is_settled(self) -> bool:
        return self.due_amount == ZERO


def summarize(total_fee: Any, payments: Iterable[Any] | None) -> Ledger:
    """Compute the full ledger for a fee and its payments."""
    payments = list(payments or ())
    fee = _to_decimal(total_fee)
    paid = total_paid(payments)
    return Ledger(total_fee=fee, total_paid=paid, due_amount=max(ZERO, fee - paid))
