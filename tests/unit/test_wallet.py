"""
Unit tests for the settlement arithmetic, no database involved.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.models.enums import TransactionType
from app.services.wallet import (
    WalletState,
    app_share,
    apply_entry,
    cancellation_penalty,
    has_cancellation_penalty,
    refund_amount,
    tax,
    to_money,
)

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


class TestApplyEntry:
    def test_credit_moves_balance_up(self):
        balance, entry = apply_entry(Decimal("50"), Decimal("25"), TransactionType.CANCELATION_COMPENSATION)
        assert balance == Decimal("75.00")
        assert entry.previous_balance == Decimal("50.00")
        assert entry.current_balance == Decimal("75.00")
        assert entry.amount == Decimal("25.00")

    def test_debit_can_go_negative(self):
        balance, entry = apply_entry(Decimal("10"), Decimal("-25"), TransactionType.CANCELATION_PENALTY)
        assert balance == Decimal("-15.00")
        assert entry.current_balance - entry.previous_balance == entry.amount

    def test_to_money_rounds_half_up(self):
        assert to_money("1.005") == Decimal("1.01")
        assert to_money(None) == Decimal("0.00")


class TestWalletState:
    def test_cash_completion_sequence(self):
        # debt 5, user app share 10, then the platform cut of 20
        wallet = WalletState(balance=Decimal("100"))
        wallet.debit(5, TransactionType.USER_DEBT)
        wallet.debit(10, TransactionType.USER_APP_SHARE)
        wallet.debit(20, TransactionType.APP_SHARE)

        assert wallet.balance == Decimal("65.00")
        assert [e.amount for e in wallet.entries] == [Decimal("-5.00"), Decimal("-10.00"), Decimal("-20.00")]
        # each entry starts where the previous one ended
        for before, after in zip(wallet.entries, wallet.entries[1:]):
            assert after.previous_balance == before.current_balance

    def test_every_entry_is_consistent(self):
        wallet = WalletState(balance=Decimal("12.34"))
        wallet.credit("108", TransactionType.CANCELATION_REFUND)
        wallet.debit("25", TransactionType.CANCELATION_PENALTY)
        for entry in wallet.entries:
            assert entry.current_balance - entry.previous_balance == entry.amount


class TestCancellationPenalty:
    def test_transfer_is_symmetric(self):
        passenger = WalletState(balance=Decimal("50"))
        driver = WalletState(balance=Decimal("0"))

        cancellation_penalty(passenger, driver, 25)

        assert passenger.balance == Decimal("25.00")
        assert driver.balance == Decimal("25.00")
        assert passenger.entries[0].transaction_type == TransactionType.CANCELATION_PENALTY
        assert driver.entries[0].transaction_type == TransactionType.CANCELATION_COMPENSATION


class TestRefundAmount:
    def test_price_plus_share_minus_discounts(self):
        assert refund_amount(100, 10, 2, 0) == Decimal("108.00")

    def test_missing_price_counts_as_zero(self):
        assert refund_amount(None, 10, 0, 0) == Decimal("10.00")


class TestPenaltyWindow:
    def test_far_future_start_is_free(self):
        assert not has_cancellation_penalty(NOW + timedelta(hours=2), NOW)

    def test_inside_window_is_penalized(self):
        assert has_cancellation_penalty(NOW + timedelta(minutes=10), NOW)

    def test_exactly_at_window_edge_is_penalized(self):
        assert has_cancellation_penalty(NOW + timedelta(minutes=30), NOW)

    def test_just_outside_window_is_free(self):
        assert not has_cancellation_penalty(NOW + timedelta(minutes=31), NOW)

    def test_past_start_is_penalized(self):
        assert has_cancellation_penalty(NOW - timedelta(minutes=5), NOW)

    def test_custom_window(self):
        assert has_cancellation_penalty(NOW + timedelta(minutes=50), NOW, window_minutes=60)


class TestAppShareAndTax:
    @pytest.mark.parametrize(
        "price, percent, expected",
        [(100, 20, "20.00"), (73.5, 20, "14.70"), (0, 20, "0.00"), (100, 0, "0.00")],
    )
    def test_app_share(self, price, percent, expected):
        assert app_share(price, percent) == Decimal(expected)

    def test_driver_tax(self):
        assert tax(Decimal("20"), 0.15) == Decimal("3.00")

    def test_user_tax(self):
        assert tax(Decimal("10"), 0.15) == Decimal("1.50")
