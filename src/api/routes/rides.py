"""
Ride endpoints
==============

POST  /api/v1/rides                    -- request a ride (201; CANCELLED if no driver)
GET   /api/v1/rides/{ride_id}          -- ride status, driver and fare
PATCH /api/v1/rides/{ride_id}/status   -- move an in-flight ride along
POST  /api/v1/rides/{ride_id}/complete -- complete, price and settle a ride
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.dependencies import get_dispatch, require_ride, require_rider
from src.api.middleware import limiter
from src.api.schemas import RideCreateRequest, RideResponse, RideStatusUpdateRequest
from src.config import settings
from src.services.dispatch import DispatchService

router = APIRouter(prefix="/rides", tags=["rides"])

_NOT_IN_FLIGHT = "Ride not found or already completed"


@router.post(
    "",
    status_code=201,
    response_model=RideResponse,
    summary="Request a ride",
    responses={
        201: {
            "description": (
                "Ride created.  Status is DRIVER_ASSIGNED on a match, "
                "CANCELLED when no eligible driver is available."
            )
        }
    },
)
@limiter.limit(settings.rate_limit)
async def request_ride(
    request: Request,
    body: RideCreateRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    rider = require_rider(dispatch, body.rider_id)
    ride = dispatch.request_ride(
        rider,
        body.pickup.to_domain(),
        body.drop.to_domain(),
        body.vehicle_type,
    )
    return RideResponse.from_domain(ride)


@router.get("/{ride_id}", response_model=RideResponse, summary="Get a ride")
@limiter.limit(settings.rate_limit)
async def get_ride(
    request: Request,
    ride_id: int,
    dispatch: DispatchService = Depends(get_dispatch),
):
    return RideResponse.from_domain(require_ride(dispatch, ride_id))


@router.patch(
    "/{ride_id}/status",
    response_model=RideResponse,
    summary="Update an in-flight ride's status",
    description=(
        "COMPLETED prices and settles the ride; CANCELLED releases the driver. "
        "Illegal transitions return 409."
    ),
)
@limiter.limit(settings.rate_limit)
async def update_status(
    request: Request,
    ride_id: int,
    body: RideStatusUpdateRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    ride = dispatch.update_ride_status(ride_id, body.status)
    if ride is None:
        raise HTTPException(status_code=404, detail=_NOT_IN_FLIGHT)
    return RideResponse.from_domain(ride)


@router.post(
    "/{ride_id}/complete",
    response_model=RideResponse,
    summary="Complete a ride",
)
@limiter.limit(settings.rate_limit)
async def complete_ride(
    request: Request,
    ride_id: int,
    dispatch: DispatchService = Depends(get_dispatch),
):
    ride = dispatch.complete_ride(ride_id)
    if ride is None:
        raise HTTPException(status_code=404, detail=_NOT_IN_FLIGHT)
    return RideResponse.from_domain(ride)
