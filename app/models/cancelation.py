from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.vip_trip import VipTrip


class Cancelation(Base):
    """
    Who cancelled a VIP trip and why. One per trip; a driver's PICK_UP_OTHERS
    record is overwritten when the passenger later cancels the held trip.
    """

    __tablename__ = "cancelations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("vip_trips.trip_id", ondelete="CASCADE"), unique=True, nullable=False
    )
    # PASSENGER | DRIVER
    canceled_by: Mapped[str] = mapped_column(String(10), nullable=False)
    reason: Mapped[str] = mapped_column(String(30), nullable=False)
    note: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    passenger_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    driver_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    vip_trip: Mapped["VipTrip"] = relationship(back_populates="cancelation")
