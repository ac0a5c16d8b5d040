"""
Wallet settlement arithmetic.

Everything here is pure: balances go in, new balances and ledger entries come
out. Binding the results to user rows and transaction tables is done by
app.services.ledger, inside the caller's transaction.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

from app.models.enums import TransactionType

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize any numeric to 2dp (None counts as zero)."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LedgerEntry:
    amount: Decimal
    transaction_type: TransactionType
    previous_balance: Decimal
    current_balance: Decimal


def apply_entry(
    balance: Decimal,
    amount: Decimal,
    transaction_type: TransactionType,
) -> tuple[Decimal, LedgerEntry]:
    """
    Apply a signed amount to a balance.
    Returns (new_balance, entry) where entry.current - entry.previous == entry.amount.
    """
    previous = to_money(balance)
    delta = to_money(amount)
    current = previous + delta
    return current, LedgerEntry(delta, transaction_type, previous, current)


@dataclass
class WalletState:
    """Running balance of one wallet during a settlement, plus the entries it produced."""

    balance: Decimal
    entries: list[LedgerEntry] = field(default_factory=list)

    def __post_init__(self):
        self.balance = to_money(self.balance)

    def credit(self, amount, transaction_type: TransactionType) -> LedgerEntry:
        return self._apply(to_money(amount), transaction_type)

    def debit(self, amount, transaction_type: TransactionType) -> LedgerEntry:
        return self._apply(-to_money(amount), transaction_type)

    def _apply(self, amount: Decimal, transaction_type: TransactionType) -> LedgerEntry:
        self.balance, entry = apply_entry(self.balance, amount, transaction_type)
        self.entries.append(entry)
        return entry


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

def cancellation_penalty(at_fault: WalletState, other: WalletState, amount) -> None:
    """Fixed transfer: at-fault party pays the penalty, the other party is compensated."""
    at_fault.debit(amount, TransactionType.CANCELATION_PENALTY)
    other.credit(amount, TransactionType.CANCELATION_COMPENSATION)


def refund_amount(price, user_app_share, app_share_discount, discount) -> Decimal:
    """What a wallet/card passenger gets back when the trip is cancelled."""
    return (
        to_money(price)
        + to_money(user_app_share)
        - to_money(app_share_discount)
        - to_money(discount)
    )


def has_cancellation_penalty(start_date: datetime, now: datetime, window_minutes: int = 30) -> bool:
    """
    True once `now` is inside the window before the scheduled start, or past it.
    Only a start that is strictly more than `window_minutes` away is penalty-free.
    """
    return not (now + timedelta(minutes=window_minutes) < start_date)


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------

def app_share(price, percent) -> Decimal:
    """Platform cut of the trip price; `percent` is e.g. 20 for 20%."""
    return to_money(to_money(price) * Decimal(str(percent)) / Decimal("100"))


def tax(amount, rate) -> Decimal:
    return to_money(to_money(amount) * Decimal(str(rate)))
