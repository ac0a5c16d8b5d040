"""
Binds WalletState arithmetic to user rows and the wallet transaction tables.

Wallets are loaded with a row lock inside the caller's transaction, so the
logged previous_balance is always the balance the store is about to change.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError
from app.models.user import User
from app.models.wallet import DriverWalletTransaction, PassengerWalletTransaction
from app.services.wallet import WalletState

logger = logging.getLogger(__name__)


class Wallet:
    balance_attr: str
    transaction_model: type

    def __init__(self, user: User):
        self.user = user
        self.state = WalletState(balance=getattr(user, self.balance_attr))
        self._recorded = 0

    @classmethod
    async def load(cls, db: AsyncSession, user_id: int) -> "Wallet":
        result = await db.execute(
            select(User).where(User.id == user_id).with_for_update().execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return cls(user)

    def record(self, db: AsyncSession, trip_id: int | None) -> int:
        """Write pending entries and the new balance. Returns the number of rows added."""
        pending = self.state.entries[self._recorded:]
        for entry in pending:
            db.add(
                self.transaction_model(
                    user_id=self.user.id,
                    trip_id=trip_id,
                    amount=entry.amount,
                    transaction_type=entry.transaction_type.value,
                    previous_balance=entry.previous_balance,
                    current_balance=entry.current_balance,
                )
            )
        if pending:
            setattr(self.user, self.balance_attr, self.state.balance)
            logger.debug(
                "%s user=%s trip=%s rows=%d balance=%s",
                type(self).__name__, self.user.id, trip_id, len(pending), self.state.balance,
            )
        self._recorded = len(self.state.entries)
        return len(pending)


class PassengerWallet(Wallet):
    balance_attr = "user_wallet_balance"
    transaction_model = PassengerWalletTransaction


class DriverWallet(Wallet):
    balance_attr = "driver_wallet_balance"
    transaction_model = DriverWalletTransaction
