from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.enums import (
    Gender,
    PaymentMethod,
    TripCancelationReason,
    TripStatus,
    TripType,
)


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

class CamelModel(BaseModel):
    """Notification and regulator payloads: camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationUser(CamelModel):
    """Fields a push notifier needs to reach one user."""

    uuid: str
    fcm_tokens: list[str] = []
    preferred_language: str


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


# ---------------------------------------------------------------------------
# Trip creation / detail
# ---------------------------------------------------------------------------

class VipTripCreateRequest(BaseModel):
    pickup_location_lat: float = Field(..., ge=-90, le=90)
    pickup_location_lng: float = Field(..., ge=-180, le=180)
    pickup_description: str = Field(..., min_length=1, max_length=500)
    destination_location_lat: float = Field(..., ge=-90, le=90)
    destination_location_lng: float = Field(..., ge=-180, le=180)
    destination_description: str = Field(..., min_length=1, max_length=500)
    gender: Gender = Gender.ANY
    features: list[str] = []
    start_date: datetime
    distance: Optional[float] = Field(default=None, ge=0)


class VipTripCreate(VipTripCreateRequest):
    """Creation input once the passenger is known (from the token or a rebooking)."""

    passenger_id: int


class PassengerBrief(BaseModel):
    id: int
    name: str
    avatar: Optional[str] = None
    passenger_rate: float

    model_config = {"from_attributes": True}


class TripResponse(BaseModel):
    id: int
    status: TripStatus
    type: TripType
    gender: Gender
    features: list[str]
    start_date: datetime
    pickup_time: Optional[datetime] = None
    end_date: Optional[datetime] = None
    price: Optional[Decimal] = None
    distance: Optional[float] = None
    driver_id: Optional[int] = None

    model_config = {"from_attributes": True}


class VipTripResponse(BaseModel):
    trip_id: int
    passenger_id: int
    pickup_location_lat: float
    pickup_location_lng: float
    pickup_description: str
    destination_location_lat: float
    destination_location_lng: float
    destination_description: str
    payment_method: PaymentMethod
    user_debt: Decimal
    user_app_share: Decimal
    app_share_discount: Decimal
    discount: Decimal
    trip: TripResponse
    passenger: PassengerBrief

    model_config = {"from_attributes": True}


class VipTripDetailResponse(VipTripResponse):
    trips: int  # passenger's completed trips, VIP and basic


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

class CancelTripRequest(BaseModel):
    reason: TripCancelationReason
    note: Optional[str] = Field(default=None, max_length=1000)


class CancelationResponse(CamelModel):
    """Who should be told about the cancellation."""

    type: TripType
    users: list[NotificationUser]
    replacement_trip_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------

class TripStatusInfo(CamelModel):
    id: int
    status: TripStatus
    driver_id: int
    users: list[NotificationUser]


class TripSummary(CamelModel):
    """Per-trip report for the regulator."""

    sequence_number: Optional[str] = None
    trip_id: int
    driver_id: Optional[str] = None
    started_when: str
    pickup_timestamp: Optional[str] = None
    dropoff_timestamp: str
    distance_in_meters: Optional[float] = None
    duration_in_seconds: float
    customer_rating: int = 5
    customer_waiting_time_in_seconds: Optional[int] = None
    origin_latitude: float
    origin_longitude: float
    destination_latitude: float
    destination_longitude: float
    trip_cost: Decimal


class EndTripResponse(CamelModel):
    trip_status_info: TripStatusInfo
    trip_summary: TripSummary


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------

class LocalizedName(BaseModel):
    ar_name: str
    en_name: str

    model_config = {"from_attributes": True}


class VehicleBrief(BaseModel):
    id: int
    serial_no: str
    plate_alphabet: Optional[str] = None
    plate_alphabet_ar: Optional[str] = None
    plate_number: Optional[str] = None
    seats_no: int
    production_year: Optional[int] = None
    color: Optional[LocalizedName] = None
    vehicle_class: Optional[LocalizedName] = None
    vehicle_type: Optional[LocalizedName] = None
    vehicle_name: Optional[LocalizedName] = None

    model_config = {"from_attributes": True}


class OfferDriver(BaseModel):
    name: str
    avatar: Optional[str] = None
    driver_rate: float
    vehicle: Optional[VehicleBrief] = None


class OfferResponse(BaseModel):
    id: int
    trip_id: int
    driver_id: int
    price: Decimal
    created_at: Optional[datetime] = None
    driver: OfferDriver


class OfferPage(BaseModel):
    items: list[OfferResponse]
    meta: PageMeta


# ---------------------------------------------------------------------------
# Driver location
# ---------------------------------------------------------------------------

class LocationUpdateRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
