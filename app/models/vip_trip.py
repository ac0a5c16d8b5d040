from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Float, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.enums import PaymentMethod

if TYPE_CHECKING:
    from app.models.cancelation import Cancelation
    from app.models.trip import Trip
    from app.models.user import User


class VipTrip(Base):
    """Premium-ride detail row, created together with its Trip (1:1)."""

    __tablename__ = "vip_trips"

    trip_id: Mapped[int] = mapped_column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True)
    passenger_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    pickup_location_lat: Mapped[float] = mapped_column(Float, nullable=False)
    pickup_location_lng: Mapped[float] = mapped_column(Float, nullable=False)
    pickup_description: Mapped[str] = mapped_column(String(500), nullable=False)
    destination_location_lat: Mapped[float] = mapped_column(Float, nullable=False)
    destination_location_lng: Mapped[float] = mapped_column(Float, nullable=False)
    destination_description: Mapped[str] = mapped_column(String(500), nullable=False)

    # CASH | WALLET | CARD
    payment_method: Mapped[str] = mapped_column(String(10), nullable=False, default=PaymentMethod.CASH.value)
    user_debt: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    user_app_share: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    app_share_discount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    discount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    trip: Mapped["Trip"] = relationship(back_populates="vip_trip")
    passenger: Mapped["User"] = relationship()
    cancelation: Mapped[Optional["Cancelation"]] = relationship(back_populates="vip_trip", uselist=False)
