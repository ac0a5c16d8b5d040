from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.enums import PassengerTripStatus

if TYPE_CHECKING:
    from app.models.trip import Trip


class BasicTrip(Base):
    """Shared-ride detail row; several passengers join one trip."""

    __tablename__ = "basic_trips"

    trip_id: Mapped[int] = mapped_column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True)
    seats: Mapped[int] = mapped_column(Integer, nullable=False, default=4)

    trip: Mapped["Trip"] = relationship(back_populates="basic_trip")
    passengers: Mapped[list["BasicTripPassenger"]] = relationship(back_populates="basic_trip")


class BasicTripPassenger(Base):
    __tablename__ = "basic_trip_passengers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    basic_trip_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("basic_trips.trip_id", ondelete="CASCADE"), nullable=False, index=True
    )
    passenger_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # PENDING | ACCEPTED | COMPLETED | CANCELLED
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PassengerTripStatus.PENDING.value)

    basic_trip: Mapped[BasicTrip] = relationship(back_populates="passengers")
