"""
VIP trip lifecycle: creation, cancellation by either party, completion, reads.

Every settlement runs inside one `atomic` block:
  1. Lock the trip row (SELECT ... FOR UPDATE) and re-check its state
  2. Lock both wallets and read their balances in the same transaction
  3. Apply the settlement steps in order on in-memory WalletState objects
  4. Write one ledger row per entry and the final balances
Any failure rolls the whole block back.
"""
import logging

import redis.asyncio as aioredis
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import get_settings
from app.database import atomic
from app.exceptions import InvalidStateError, NotFoundError
from app.models.basic_trip import BasicTrip, BasicTripPassenger
from app.models.cancelation import Cancelation
from app.models.enums import (
    CanceledBy,
    PassengerTripStatus,
    PaymentMethod,
    TransactionType,
    TripCancelationReason,
    TripStatus,
    TripType,
)
from app.models.offer import Offer
from app.models.trip import Trip
from app.models.user import User, UserFcmToken
from app.models.vehicle import Vehicle
from app.models.vip_trip import VipTrip
from app.schemas.schemas import (
    CancelationResponse,
    CancelTripRequest,
    EndTripResponse,
    NotificationUser,
    TripStatusInfo,
    VipTripCreate,
)
from app.services.clock import ensure_utc, utcnow
from app.services.ledger import DriverWallet, PassengerWallet
from app.services.location import validate_driver_in_location
from app.services.pagination import Page, paginate
from app.services.recent_address import add_recent_address
from app.services.trip_summary import build_trip_summary
from app.services.wallet import (
    app_share,
    cancellation_penalty,
    has_cancellation_penalty,
    refund_amount,
    tax,
    to_money,
)

logger = logging.getLogger(__name__)
settings = get_settings()

NON_CANCELABLE = {s.value for s in (TripStatus.CANCELLED, TripStatus.COMPLETED, TripStatus.INPROGRESS)}
REFUNDABLE = {m.value for m in (PaymentMethod.WALLET, PaymentMethod.CARD)}
VIP_FEATURE = "VIP"


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------

async def _lock_trip(db: AsyncSession, trip_id: int, *options) -> Trip | None:
    result = await db.execute(
        select(Trip)
        .where(Trip.id == trip_id)
        .options(selectinload(Trip.vip_trip), *options)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _load_vip_trip(db: AsyncSession, trip_id: int) -> VipTrip | None:
    result = await db.execute(
        select(VipTrip)
        .where(VipTrip.trip_id == trip_id)
        .options(selectinload(VipTrip.trip), selectinload(VipTrip.passenger))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _notification_user(db: AsyncSession, user_id: int) -> NotificationUser:
    user = await db.get(User, user_id)
    tokens = await db.scalars(select(UserFcmToken.token).where(UserFcmToken.user_id == user_id))
    return NotificationUser(
        uuid=user.uuid,
        fcm_tokens=list(tokens),
        preferred_language=user.preferred_language,
    )


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def _build_trip(data: VipTripCreate) -> Trip:
    return Trip(
        status=TripStatus.PENDING.value,
        type=TripType.VIPTRIP.value,
        gender=data.gender.value,
        features=list(data.features),
        start_date=data.start_date,
        distance=data.distance,
        vip_trip=VipTrip(
            passenger_id=data.passenger_id,
            pickup_location_lat=data.pickup_location_lat,
            pickup_location_lng=data.pickup_location_lng,
            pickup_description=data.pickup_description,
            destination_location_lat=data.destination_location_lat,
            destination_location_lng=data.destination_location_lng,
            destination_description=data.destination_description,
        ),
    )


async def create_trip(db: AsyncSession, data: VipTripCreate) -> VipTrip:
    """Create a PENDING VIP trip and its detail row in one write."""
    # TODO: notify nearby drivers once the dispatch service exposes an API for it
    async with atomic(db):
        trip = _build_trip(data)
        db.add(trip)
    logger.info("Created VIP trip=%s passenger=%s", trip.id, data.passenger_id)
    return await _load_vip_trip(db, trip.id)


def _build_replacement(trip: Trip, vip: VipTrip) -> Trip:
    """Same request for the same passenger, without the VIP feature, never in the past."""
    return _build_trip(
        VipTripCreate(
            passenger_id=vip.passenger_id,
            pickup_location_lat=vip.pickup_location_lat,
            pickup_location_lng=vip.pickup_location_lng,
            pickup_description=vip.pickup_description,
            destination_location_lat=vip.destination_location_lat,
            destination_location_lng=vip.destination_location_lng,
            destination_description=vip.destination_description,
            gender=trip.gender,
            features=[f for f in trip.features or [] if f != VIP_FEATURE],
            start_date=max(ensure_utc(trip.start_date), utcnow()),
            distance=trip.distance,
        )
    )


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

async def _held_cancelation(db: AsyncSession, trip: Trip) -> Cancelation | None:
    """The record left by a driver's PICK_UP_OTHERS cancellation, if the trip is ON_HOLD."""
    if trip.status != TripStatus.ON_HOLD:
        return None
    return await db.scalar(select(Cancelation).where(Cancelation.trip_id == trip.id))


def _write_cancelation(
    db: AsyncSession,
    trip: Trip,
    passenger_id: int,
    driver_id: int,
    data: CancelTripRequest,
    canceled_by: CanceledBy,
    existing: Cancelation | None = None,
) -> None:
    if data.reason == TripCancelationReason.PICK_UP_OTHERS:
        trip.status = TripStatus.ON_HOLD.value
    else:
        trip.status = TripStatus.CANCELLED.value
    if existing is not None:
        # One record per trip: the final cancellation overwrites the hold
        existing.canceled_by = canceled_by.value
        existing.reason = data.reason.value
        existing.note = data.note
        return
    db.add(
        Cancelation(
            trip_id=trip.id,
            canceled_by=canceled_by.value,
            reason=data.reason.value,
            note=data.note,
            passenger_id=passenger_id,
            driver_id=driver_id,
        )
    )


def _count_cancelation(passenger: User, driver: User) -> None:
    passenger.passenger_cancel_count += 1
    driver.driver_cancel_count += 1


def _settle_debt(vip: VipTrip, passenger: PassengerWallet) -> None:
    """Cash trips: take back the debt credited to the passenger when the offer was accepted."""
    if vip.payment_method == PaymentMethod.CASH and to_money(vip.user_debt) > 0:
        passenger.state.debit(vip.user_debt, TransactionType.DEBT_UNPAID)


def _settle_discount_and_refund(trip: Trip, vip: VipTrip, passenger: PassengerWallet) -> None:
    if to_money(vip.app_share_discount) > 0:
        passenger.user.discount_app_share_count += 1
    if vip.payment_method in REFUNDABLE:
        passenger.state.credit(
            refund_amount(trip.price, vip.user_app_share, vip.app_share_discount, vip.discount),
            TransactionType.CANCELATION_REFUND,
        )


async def cancel_trip(
    db: AsyncSession,
    trip_id: int,
    passenger_id: int,
    data: CancelTripRequest,
) -> CancelationResponse | None:
    """
    Passenger cancels their trip.

    Without an assigned driver the trip is simply deleted and None is returned.
    Otherwise the ledgers are settled (unless a driver already did so when
    putting the trip ON_HOLD) and the driver's notification details are
    returned.
    """
    async with atomic(db):
        trip = await _lock_trip(db, trip_id)
        vip = trip.vip_trip if trip else None
        if vip is None or vip.passenger_id != passenger_id:
            raise NotFoundError("Trip not found")
        if trip.status in NON_CANCELABLE:
            logger.warning("Rejected passenger cancel of trip=%s in status %s", trip_id, trip.status)
            raise InvalidStateError(f"You can't cancel {trip.status} trip")

        if trip.driver_id is None:
            await db.delete(trip)
            logger.info("Deleted unassigned trip=%s on passenger cancel", trip_id)
            return None

        driver_id = trip.driver_id
        held = await _held_cancelation(db, trip)
        # A held trip was settled when the driver gave it up; only the record changes now
        settled = held is not None
        penalty = not settled and has_cancellation_penalty(
            ensure_utc(trip.start_date), utcnow(), settings.penalty_window_minutes
        )
        passenger = await PassengerWallet.load(db, passenger_id)
        driver = await DriverWallet.load(db, driver_id)

        _write_cancelation(db, trip, passenger_id, driver_id, data, CanceledBy.PASSENGER, held)
        if not settled:
            _settle_debt(vip, passenger)
        if penalty:
            cancellation_penalty(passenger.state, driver.state, settings.cancellation_penalty)
            _count_cancelation(passenger.user, driver.user)
        if not settled:
            _settle_discount_and_refund(trip, vip, passenger)

        rows = passenger.record(db, trip.id) + driver.record(db, trip.id)
        notify = await _notification_user(db, driver_id)

    logger.info(
        "Passenger %s cancelled trip=%s penalty=%s held=%s ledger_rows=%d",
        passenger_id, trip_id, penalty, settled, rows,
    )
    return CancelationResponse(type=trip.type, users=[notify])


async def driver_cancel_trip(
    db: AsyncSession,
    trip_id: int,
    driver_id: int,
    data: CancelTripRequest,
) -> CancelationResponse:
    """
    Driver cancels a trip assigned to them.

    Unless the driver left to pick up other passengers, the driver pays the
    penalty, the passenger is compensated and a replacement trip (without the
    VIP feature) is booked for the passenger.
    """
    async with atomic(db):
        trip = await _lock_trip(db, trip_id)
        vip = trip.vip_trip if trip else None
        if vip is None or trip.driver_id != driver_id:
            raise NotFoundError("Trip not found")

        passenger = await PassengerWallet.load(db, vip.passenger_id)
        driver = await DriverWallet.load(db, driver_id)

        _write_cancelation(db, trip, vip.passenger_id, driver_id, data, CanceledBy.DRIVER)
        _settle_debt(vip, passenger)

        replacement = None
        if data.reason != TripCancelationReason.PICK_UP_OTHERS:
            cancellation_penalty(driver.state, passenger.state, settings.cancellation_penalty)
            _count_cancelation(passenger.user, driver.user)
            replacement = _build_replacement(trip, vip)
            db.add(replacement)

        _settle_discount_and_refund(trip, vip, passenger)

        rows = passenger.record(db, trip.id) + driver.record(db, trip.id)
        notify = await _notification_user(db, vip.passenger_id)

    logger.info(
        "Driver %s cancelled trip=%s reason=%s replacement=%s ledger_rows=%d",
        driver_id, trip_id, data.reason.value, replacement.id if replacement else None, rows,
    )
    return CancelationResponse(
        type=trip.type,
        users=[notify],
        replacement_trip_id=replacement.id if replacement else None,
    )


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------

async def end_trip(
    db: AsyncSession,
    redis: aioredis.Redis,
    driver_id: int,
    trip_id: int,
) -> EndTripResponse:
    """
    Complete a trip and settle the driver's wallet:
      1. Cash trips: driver surrenders the passenger debt and the passenger app share
      2. Trip stamped COMPLETED with shares and taxes
      3. Wallet/card trips: driver credited with the price; cash discount credited back
      4. Platform app share debited from the driver
      5. Destination saved as a recent address for the passenger
    """
    async with atomic(db):
        trip = await _lock_trip(
            db, trip_id, selectinload(Trip.vehicle), selectinload(Trip.driver)
        )
        vip = trip.vip_trip if trip else None
        if trip is None or trip.driver_id != driver_id or vip is None:
            raise NotFoundError("Trip not found")
        if trip.status == TripStatus.COMPLETED:
            logger.warning("Rejected second end of trip=%s", trip_id)
            raise InvalidStateError("Trip already ended")

        await validate_driver_in_location(
            redis, driver_id, vip.destination_location_lat, vip.destination_location_lng
        )

        driver = await DriverWallet.load(db, driver_id)
        price = to_money(trip.price)
        driver_app_share = app_share(price, settings.app_share)
        user_app_share = to_money(vip.user_app_share) - to_money(vip.app_share_discount)
        is_cash = vip.payment_method == PaymentMethod.CASH

        if is_cash:
            if to_money(vip.user_debt) > 0:
                driver.state.debit(vip.user_debt, TransactionType.USER_DEBT)
            if user_app_share > 0:
                driver.state.debit(user_app_share, TransactionType.USER_APP_SHARE)

        trip.status = TripStatus.COMPLETED.value
        trip.driver_app_share = driver_app_share
        trip.user_app_share = user_app_share
        trip.user_debt = to_money(vip.user_debt)
        trip.driver_tax = tax(driver_app_share, settings.tax_rate)
        trip.user_tax = tax(user_app_share, settings.tax_rate)
        trip.end_date = utcnow()

        if vip.payment_method in REFUNDABLE:
            driver.state.credit(price, TransactionType.COMPLETE_TRIP)
        if is_cash and to_money(vip.discount) > 0:
            driver.state.credit(vip.discount, TransactionType.COMPLETE_TRIP)
        # Logged even when the share is zero
        driver.state.debit(driver_app_share, TransactionType.APP_SHARE)
        rows = driver.record(db, trip.id)

        add_recent_address(
            db,
            user_id=vip.passenger_id,
            description=vip.destination_description,
            lat=vip.destination_location_lat,
            lng=vip.destination_location_lng,
        )
        notify = await _notification_user(db, vip.passenger_id)

    logger.info(
        "Driver %s completed trip=%s price=%s app_share=%s ledger_rows=%d",
        driver_id, trip_id, price, driver_app_share, rows,
    )
    return EndTripResponse(
        trip_status_info=TripStatusInfo(
            id=trip.id, status=trip.status, driver_id=driver_id, users=[notify]
        ),
        trip_summary=build_trip_summary(trip, vip, settings.reporting_timezone),
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_trip_offers(db: AsyncSession, trip_id: int, page: int = 1, limit: int | None = None) -> Page:
    stmt = (
        select(Offer)
        .where(Offer.trip_id == trip_id)
        .options(
            selectinload(Offer.driver)
            .selectinload(User.active_vehicles)
            .options(
                selectinload(Vehicle.color),
                selectinload(Vehicle.vehicle_class),
                selectinload(Vehicle.vehicle_type),
                selectinload(Vehicle.vehicle_name),
            )
        )
        .order_by(Offer.created_at.desc(), Offer.id.desc())
    )
    return await paginate(db, stmt, page, limit)


async def get_trip(db: AsyncSession, trip_id: int) -> tuple[VipTrip, int]:
    """VIP trip with its passenger, plus how many trips that passenger has completed."""
    vip = await _load_vip_trip(db, trip_id)
    if vip is None:
        raise NotFoundError("Trip not found")

    passenger_id = vip.passenger_id
    completed = await db.scalar(
        select(func.count(Trip.id)).where(
            Trip.status == TripStatus.COMPLETED.value,
            or_(
                Trip.vip_trip.has(VipTrip.passenger_id == passenger_id),
                Trip.basic_trip.has(
                    BasicTrip.passengers.any(
                        and_(
                            BasicTripPassenger.passenger_id == passenger_id,
                            BasicTripPassenger.status == PassengerTripStatus.COMPLETED.value,
                        )
                    )
                ),
            ),
        )
    )
    return vip, completed or 0
