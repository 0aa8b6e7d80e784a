"""
Shared test fixtures.

The dispatch engine is in-memory, so every test gets a fresh
``DispatchService``; nothing needs to be created or torn down outside the
process.  The API client talks to the ASGI app directly via httpx.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.domain.entities import Driver, Location, Rider, Vehicle
from src.domain.enums import RideStatus, VehicleType
from src.services.dispatch import DispatchService


class RecordingListener:
    """Ride listener that appends ``(name, ride id, status)`` to *log*."""

    def __init__(self, name: str = "listener", log: list | None = None):
        self.name = name
        self.log: list = log if log is not None else []

    def handle(self, ride, new_status: RideStatus) -> None:
        self.log.append((self.name, ride.id, new_status))


def make_driver(
    name: str = "Alice",
    vehicle_type: VehicleType = VehicleType.SEDAN,
    location: Location = Location(0.0, 0.0),
    rating: float = 4.8,
    fare_per_km: float = 15.0,
) -> Driver:
    vehicle = Vehicle(
        plate_number=f"KA-{name[:3].upper()}",
        vehicle_type=vehicle_type,
        capacity=4,
        fare_per_km=fare_per_km,
    )
    return Driver(
        name=name, phone="9999990001", vehicle=vehicle, location=location, rating=rating
    )


def make_rider(name: str = "Eve", discount: float = 0.0) -> Rider:
    return Rider(
        name=name,
        phone="8888880001",
        location=Location(0.0, 0.0),
        discount_amount=discount,
    )


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def dispatch() -> DispatchService:
    return DispatchService()


@pytest.fixture
def rider() -> Rider:
    return make_rider()


@pytest.fixture
def sedan_driver() -> Driver:
    return make_driver()


@pytest_asyncio.fixture
async def client(dispatch: DispatchService) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient bound to an app that owns the ``dispatch`` fixture."""
    from src.api.app import create_app

    app = create_app(dispatch)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
