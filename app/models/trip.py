from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.enums import Gender, TripStatus

if TYPE_CHECKING:
    from app.models.basic_trip import BasicTrip
    from app.models.offer import Offer
    from app.models.user import User
    from app.models.vehicle import Vehicle
    from app.models.vip_trip import VipTrip


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # PENDING | ON_HOLD | INPROGRESS | COMPLETED | CANCELLED
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TripStatus.PENDING.value, index=True)
    # VIPTRIP | BASICTRIP
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False, default=Gender.ANY.value)
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    pickup_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    distance: Mapped[float | None] = mapped_column(Float, nullable=True)  # metres

    driver_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    vehicle_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("vehicles.id"), nullable=True)

    # Stamped on completion
    driver_app_share: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    user_app_share: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    user_debt: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    driver_tax: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    user_tax: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    vip_trip: Mapped[Optional["VipTrip"]] = relationship(
        back_populates="trip", uselist=False, cascade="all, delete-orphan"
    )
    basic_trip: Mapped[Optional["BasicTrip"]] = relationship(back_populates="trip", uselist=False)
    offers: Mapped[list["Offer"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan", passive_deletes=True
    )
    driver: Mapped[Optional["User"]] = relationship(foreign_keys=[driver_id])
    vehicle: Mapped[Optional["Vehicle"]] = relationship()
