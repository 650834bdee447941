"""Tests for the patient financial ledger."""

import random
from decimal import Decimal

import pytest

from smilehub.services.ledger import Ledger, due_amount, summarize, total_paid


def _payments(*amounts):
    return [{"id": str(i), "amount": amount, "method": "Cash"} for i, amount in enumerate(amounts)]


class TestTotalPaid:
    def test_empty(self):
        assert total_paid([]) == Decimal("0")
        assert total_paid(None) == Decimal("0")

    def test_sums_amounts(self):
        assert total_paid(_payments(400, 250.5, "100")) == Decimal("750.5")

    def test_float_amounts_are_exact(self):
        assert total_paid(_payments(0.1, 0.2)) == Decimal("0.3")

    def test_order_independent(self):
        payments = _payments(*[random.randint(1, 5000) for _ in range(25)])
        assert total_paid(payments) == total_paid(list(reversed(payments)))

    def test_accepts_objects_with_amount(self):
        class Payment:
            def __init__(self, amount):
                self.amount = amount

        assert total_paid([Payment(Decimal("10")), Payment(Decimal("5.25"))]) == Decimal("15.25")


class TestDueAmount:
    def test_no_payments(self):
        assert due_amount(1000, []) == Decimal("1000")

    def test_partial_payment(self):
        assert due_amount(Decimal("1000"), _payments(400)) == Decimal("600")

    def test_overpayment_clamps_to_zero(self):
        assert due_amount(1000, _payments(800, 700)) == Decimal("0")

    @pytest.mark.parametrize("fee", [0, 1, 999.99, 45000])
    def test_never_negative(self, fee):
        payments = _payments(*[random.randint(1, 20000) for _ in range(10)])
        assert due_amount(fee, payments) >= 0


class TestSummarize:
    def test_summary(self):
        ledger = summarize(8000, _payments(3000, 2000))
        assert ledger == Ledger(
            total_fee=Decimal("8000"),
            total_paid=Decimal("5000"),
            due_amount=Decimal("3000"),
        )
        assert ledger.is_settled is False

    def test_settled(self):
        assert summarize(500, _payments(500)).is_settled is True

    def test_missing_fee_counts_as_zero(self):
        ledger = summarize(None, [])
        assert ledger.total_fee == Decimal("0")
        assert ledger.is_settled is True
