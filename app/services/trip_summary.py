"""
Builds the completed-trip report sent to the regulator.
"""
from datetime import datetime
from math import ceil
from zoneinfo import ZoneInfo

from app.models.trip import Trip
from app.models.vip_trip import VipTrip
from app.schemas.schemas import TripSummary
from app.services.clock import ensure_utc
from app.services.wallet import to_money

CUSTOMER_RATING = 5


def to_reporting_time(value: datetime, tz_name: str) -> str:
    return ensure_utc(value).astimezone(ZoneInfo(tz_name)).isoformat()


def build_trip_summary(trip: Trip, vip: VipTrip, tz_name: str) -> TripSummary:
    """`trip` must be completed (end_date set) with vehicle and driver loaded."""
    started = ensure_utc(trip.start_date)
    ended = ensure_utc(trip.end_date)

    pickup_timestamp = None
    waiting_seconds = None
    if trip.pickup_time is not None:
        pickup = ensure_utc(trip.pickup_time)
        pickup_timestamp = to_reporting_time(pickup, tz_name)
        waiting_seconds = ceil(abs((started - pickup).total_seconds()))

    return TripSummary(
        sequence_number=trip.vehicle.serial_no if trip.vehicle else None,
        trip_id=trip.id,
        driver_id=trip.driver.national_id if trip.driver else None,
        started_when=started.isoformat(),
        pickup_timestamp=pickup_timestamp,
        dropoff_timestamp=to_reporting_time(ended, tz_name),
        distance_in_meters=trip.distance,
        duration_in_seconds=(ended - started).total_seconds(),
        customer_rating=CUSTOMER_RATING,
        customer_waiting_time_in_seconds=waiting_seconds,
        origin_latitude=vip.pickup_location_lat,
        origin_longitude=vip.pickup_location_lng,
        destination_latitude=vip.destination_location_lat,
        destination_longitude=vip.destination_location_lng,
        trip_cost=to_money(trip.price),
    )
