import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.vehicle import Vehicle


class User(Base):
    """A passenger, a driver, or both. Each role keeps its own wallet balance."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    national_id: Mapped[str | None] = mapped_column(String(20), nullable=True)
    preferred_language: Mapped[str] = mapped_column(String(5), nullable=False, default="ar")

    user_wallet_balance: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    driver_wallet_balance: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    passenger_cancel_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    driver_cancel_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    discount_app_share_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    passenger_rate: Mapped[float] = mapped_column(Float, nullable=False, default=5.0)
    driver_rate: Mapped[float] = mapped_column(Float, nullable=False, default=5.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    fcm_tokens: Mapped[list["UserFcmToken"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    # Only the driver's current (non-deleted) vehicles
    active_vehicles: Mapped[list["Vehicle"]] = relationship(
        primaryjoin="and_(User.id == Vehicle.driver_id, Vehicle.deleted_at.is_(None))",
        order_by="Vehicle.id",
        viewonly=True,
    )


class UserFcmToken(Base):
    __tablename__ = "user_fcm_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token: Mapped[str] = mapped_column(String(500), nullable=False)

    user: Mapped[User] = relationship(back_populates="fcm_tokens")
