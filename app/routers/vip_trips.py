"""
VIP trips router: create, read, offers, cancel (passenger / driver), end.
"""
import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Header, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.middleware.auth import get_current_driver, get_current_passenger
from app.middleware.idempotency import check_idempotency, store_idempotency_result
from app.models.offer import Offer
from app.redis_client import get_redis
from app.schemas.schemas import (
    CancelationResponse,
    CancelTripRequest,
    EndTripResponse,
    OfferDriver,
    OfferPage,
    OfferResponse,
    PageMeta,
    VehicleBrief,
    VipTripCreate,
    VipTripCreateRequest,
    VipTripDetailResponse,
    VipTripResponse,
)
from app.services import vip_trip as vip_trip_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/vip-trips", tags=["VIP Trips"])


def _offer_response(offer: Offer) -> OfferResponse:
    driver = offer.driver
    vehicle = driver.active_vehicles[0] if driver.active_vehicles else None
    return OfferResponse(
        id=offer.id,
        trip_id=offer.trip_id,
        driver_id=offer.driver_id,
        price=offer.price,
        created_at=offer.created_at,
        driver=OfferDriver(
            name=driver.name,
            avatar=driver.avatar,
            driver_rate=driver.driver_rate,
            vehicle=VehicleBrief.model_validate(vehicle) if vehicle else None,
        ),
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=VipTripResponse)
async def create_vip_trip(
    payload: VipTripCreateRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
    passenger_id: int = Depends(get_current_passenger),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
):
    if idempotency_key:
        cached = await check_idempotency(request, redis, passenger_id)
        if cached:
            return cached

    vip = await vip_trip_service.create_trip(
        db, VipTripCreate(**payload.model_dump(), passenger_id=passenger_id)
    )
    response = VipTripResponse.model_validate(vip)

    if idempotency_key:
        await store_idempotency_result(
            redis, idempotency_key, passenger_id, 201, response.model_dump(mode="json")
        )
    return response


@router.get("/{trip_id}", response_model=VipTripDetailResponse)
async def get_vip_trip(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    _: int = Depends(get_current_passenger),
):
    vip, completed = await vip_trip_service.get_trip(db, trip_id)
    return VipTripDetailResponse(
        **VipTripResponse.model_validate(vip).model_dump(), trips=completed
    )


@router.get("/{trip_id}/offers", response_model=OfferPage)
async def get_vip_trip_offers(
    trip_id: int,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    db: AsyncSession = Depends(get_db),
    _: int = Depends(get_current_passenger),
):
    result = await vip_trip_service.get_trip_offers(db, trip_id, page, limit)
    return OfferPage(
        items=[_offer_response(offer) for offer in result.items],
        meta=PageMeta(page=result.page, limit=result.limit, total=result.total, pages=result.pages),
    )


@router.post(
    "/{trip_id}/cancel",
    response_model=CancelationResponse,
    responses={status.HTTP_204_NO_CONTENT: {"description": "Unassigned trip deleted"}},
)
async def cancel_vip_trip(
    trip_id: int,
    payload: CancelTripRequest,
    db: AsyncSession = Depends(get_db),
    passenger_id: int = Depends(get_current_passenger),
):
    """Passenger cancellation. 204 when no driver was assigned yet (trip deleted)."""
    result = await vip_trip_service.cancel_trip(db, trip_id, passenger_id, payload)
    if result is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return result


@router.post("/{trip_id}/driver-cancel", response_model=CancelationResponse)
async def driver_cancel_vip_trip(
    trip_id: int,
    payload: CancelTripRequest,
    db: AsyncSession = Depends(get_db),
    driver_id: int = Depends(get_current_driver),
):
    return await vip_trip_service.driver_cancel_trip(db, trip_id, driver_id, payload)


@router.post("/{trip_id}/end", response_model=EndTripResponse)
async def end_vip_trip(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
    driver_id: int = Depends(get_current_driver),
):
    return await vip_trip_service.end_trip(db, redis, driver_id, trip_id)
