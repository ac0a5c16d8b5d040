from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class LocalizedLookup:
    """Columns shared by the vehicle lookup tables (Arabic + English label)."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ar_name: Mapped[str] = mapped_column(String(100), nullable=False)
    en_name: Mapped[str] = mapped_column(String(100), nullable=False)


class VehicleColor(LocalizedLookup, Base):
    __tablename__ = "vehicle_colors"


class VehicleClass(LocalizedLookup, Base):
    __tablename__ = "vehicle_classes"


class VehicleType(LocalizedLookup, Base):
    __tablename__ = "vehicle_types"


class VehicleName(LocalizedLookup, Base):
    __tablename__ = "vehicle_names"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    serial_no: Mapped[str] = mapped_column(String(50), nullable=False)
    plate_alphabet: Mapped[str | None] = mapped_column(String(10), nullable=True)
    plate_alphabet_ar: Mapped[str | None] = mapped_column(String(10), nullable=True)
    plate_number: Mapped[str | None] = mapped_column(String(10), nullable=True)
    seats_no: Mapped[int] = mapped_column(Integer, nullable=False, default=4)
    production_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    color_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("vehicle_colors.id"), nullable=True)
    class_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("vehicle_classes.id"), nullable=True)
    type_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("vehicle_types.id"), nullable=True)
    name_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("vehicle_names.id"), nullable=True)

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    color: Mapped[VehicleColor | None] = relationship()
    vehicle_class: Mapped[VehicleClass | None] = relationship()
    vehicle_type: Mapped[VehicleType | None] = relationship()
    vehicle_name: Mapped[VehicleName | None] = relationship()
