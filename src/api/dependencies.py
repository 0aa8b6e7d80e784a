"""FastAPI dependency injection helpers."""

from fastapi import HTTPException, Request

from src.domain.entities import Driver, Ride, Rider
from src.services.dispatch import DispatchService


def get_dispatch(request: Request) -> DispatchService:
    """Return the dispatch service owned by the running app."""
    return request.app.state.dispatch


def require_driver(dispatch: DispatchService, driver_id: int) -> Driver:
    driver = dispatch.get_driver(driver_id)
    if driver is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    return driver


def require_rider(dispatch: DispatchService, rider_id: int) -> Rider:
    rider = dispatch.get_rider(rider_id)
    if rider is None:
        raise HTTPException(status_code=404, detail="Rider not found")
    return rider


def require_ride(dispatch: DispatchService, ride_id: int) -> Ride:
    ride = dispatch.get_ride(ride_id)
    if ride is None:
        raise HTTPException(status_code=404, detail="Ride not found")
    return ride
