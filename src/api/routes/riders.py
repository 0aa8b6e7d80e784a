"""
Rider endpoints
===============

POST /api/v1/riders                     -- create a rider
GET  /api/v1/riders/{rider_id}          -- rider detail
PUT  /api/v1/riders/{rider_id}/discount -- set the flat discount
PUT  /api/v1/riders/{rider_id}/location -- move the rider
GET  /api/v1/riders/{rider_id}/rides    -- ride history, oldest first
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_dispatch, require_rider
from src.api.middleware import limiter
from src.api.schemas import (
    DiscountUpdateRequest,
    LocationSchema,
    RideResponse,
    RiderCreateRequest,
    RiderResponse,
)
from src.config import settings
from src.domain.entities import Rider
from src.services.dispatch import DispatchService

router = APIRouter(prefix="/riders", tags=["riders"])


@router.post("", status_code=201, response_model=RiderResponse, summary="Create a rider")
@limiter.limit(settings.rate_limit)
async def create_rider(
    request: Request,
    body: RiderCreateRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    rider = Rider(
        name=body.name,
        phone=body.phone,
        location=body.location.to_domain(),
        discount_amount=body.discount_amount,
    )
    dispatch.add_rider(rider)
    return RiderResponse.from_domain(rider)


@router.get("/{rider_id}", response_model=RiderResponse, summary="Get a rider")
@limiter.limit(settings.rate_limit)
async def get_rider(
    request: Request,
    rider_id: int,
    dispatch: DispatchService = Depends(get_dispatch),
):
    return RiderResponse.from_domain(require_rider(dispatch, rider_id))


@router.put(
    "/{rider_id}/discount",
    response_model=RiderResponse,
    summary="Set a rider's flat discount",
    description="Negative amounts are rejected with 422.",
)
@limiter.limit(settings.rate_limit)
async def set_discount(
    request: Request,
    rider_id: int,
    body: DiscountUpdateRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    rider = require_rider(dispatch, rider_id)
    rider.set_discount(body.amount)
    return RiderResponse.from_domain(rider)


@router.put(
    "/{rider_id}/location",
    response_model=RiderResponse,
    summary="Update a rider's current location",
)
@limiter.limit(settings.rate_limit)
async def update_location(
    request: Request,
    rider_id: int,
    body: LocationSchema,
    dispatch: DispatchService = Depends(get_dispatch),
):
    rider = require_rider(dispatch, rider_id)
    rider.update_location(body.to_domain())
    return RiderResponse.from_domain(rider)


@router.get(
    "/{rider_id}/rides",
    response_model=list[RideResponse],
    summary="List a rider's rides",
)
@limiter.limit(settings.rate_limit)
async def ride_history(
    request: Request,
    rider_id: int,
    dispatch: DispatchService = Depends(get_dispatch),
):
    rider = require_rider(dispatch, rider_id)
    return [RideResponse.from_domain(r) for r in dispatch.ride_history(rider)]
