"""
Driver endpoints
================

POST   /api/v1/drivers              -- register a driver (joins the pool)
GET    /api/v1/drivers              -- list drivers currently available
GET    /api/v1/drivers/{driver_id}  -- driver detail
PATCH  /api/v1/drivers/{driver_id}  -- move and/or re-rate a driver
DELETE /api/v1/drivers/{driver_id}  -- deregister (driver goes OFFLINE)
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_dispatch, require_driver
from src.api.middleware import limiter
from src.api.schemas import (
    DriverCreateRequest,
    DriverResponse,
    DriverUpdateRequest,
)
from src.config import settings
from src.domain.entities import Driver
from src.services.dispatch import DispatchService

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.post(
    "",
    status_code=201,
    response_model=DriverResponse,
    summary="Register a driver",
)
@limiter.limit(settings.rate_limit)
async def register_driver(
    request: Request,
    body: DriverCreateRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    driver = Driver(
        name=body.name,
        phone=body.phone,
        vehicle=body.vehicle.to_domain(),
        location=body.location.to_domain(),
        rating=body.rating,
    )
    dispatch.register_driver(driver)
    return DriverResponse.from_domain(driver)


@router.get(
    "",
    response_model=list[DriverResponse],
    summary="List available drivers in pool order",
)
@limiter.limit(settings.rate_limit)
async def list_available_drivers(
    request: Request,
    dispatch: DispatchService = Depends(get_dispatch),
):
    return [DriverResponse.from_domain(d) for d in dispatch.available_drivers()]


@router.get("/{driver_id}", response_model=DriverResponse, summary="Get a driver")
@limiter.limit(settings.rate_limit)
async def get_driver(
    request: Request,
    driver_id: int,
    dispatch: DispatchService = Depends(get_dispatch),
):
    return DriverResponse.from_domain(require_driver(dispatch, driver_id))


@router.delete(
    "/{driver_id}",
    response_model=DriverResponse,
    summary="Deregister a driver",
)
@limiter.limit(settings.rate_limit)
async def deregister_driver(
    request: Request,
    driver_id: int,
    dispatch: DispatchService = Depends(get_dispatch),
):
    driver = require_driver(dispatch, driver_id)
    dispatch.deregister_driver(driver)
    return DriverResponse.from_domain(driver)


@router.patch(
    "/{driver_id}",
    response_model=DriverResponse,
    summary="Update a driver's location or rating",
)
@limiter.limit(settings.rate_limit)
async def update_driver(
    request: Request,
    driver_id: int,
    body: DriverUpdateRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    driver = require_driver(dispatch, driver_id)
    dispatch.update_driver(
        driver,
        location=body.location.to_domain() if body.location else None,
        rating=body.rating,
    )
    return DriverResponse.from_domain(driver)
