"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Ride``: enforces valid lifecycle transitions
  (REQUESTED -> DRIVER_ASSIGNED -> EN_ROUTE_TO_PICKUP -> IN_PROGRESS ->
  COMPLETED, with CANCELLED reachable from every non-terminal state).
- **Observer Pattern** on ``Ride``: every accepted transition is pushed to
  the attached listeners, in attachment order, before the call returns.
- ``RideFactory`` hands out monotonically increasing ride ids.

Drivers, riders and rides compare by identity (``eq=False``) so the driver
pool and listener lists can remove them by identity.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .distance import euclidean
from .enums import (
    RIDE_TRANSITIONS,
    TERMINAL_STATUSES,
    DriverStatus,
    RideStatus,
    VehicleType,
)
from .errors import InvalidConfiguration, InvalidStateTransition

logger = logging.getLogger(__name__)


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float = 0.0
    longitude: float = 0.0

    def distance_to(self, other: Location) -> float:
        return euclidean(
            self.latitude, self.longitude, other.latitude, other.longitude
        )


@dataclass(frozen=True)
class Vehicle:
    plate_number: str
    vehicle_type: VehicleType
    capacity: int
    fare_per_km: float


@dataclass(frozen=True)
class RideRequest:
    """Input of a single matching decision; never stored."""

    rider: Rider
    pickup: Location
    drop: Location
    vehicle_type: VehicleType


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(eq=False)
class Driver:
    name: str
    phone: str
    vehicle: Vehicle
    location: Location = field(default_factory=Location)
    rating: float = 5.0
    status: DriverStatus = DriverStatus.AVAILABLE
    id: Optional[int] = None

    def update_location(self, location: Location) -> None:
        self.location = location

    def set_rating(self, rating: float) -> None:
        if not 0.0 <= rating <= 5.0:
            raise InvalidConfiguration(
                f"Rating must be between 0 and 5, got {rating}"
            )
        self.rating = rating

    def __str__(self) -> str:
        return (
            f"Driver{{name='{self.name}', vehicle={self.vehicle.vehicle_type.value}, "
            f"loc=({self.location.latitude}, {self.location.longitude}), "
            f"rating={self.rating}}}"
        )


@dataclass(eq=False)
class Rider:
    name: str
    phone: str
    location: Location = field(default_factory=Location)
    discount_amount: float = 0.0
    ride_history: list[int] = field(default_factory=list)
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.set_discount(self.discount_amount)

    @property
    def has_discount(self) -> bool:
        return self.discount_amount > 0.0

    def set_discount(self, amount: float) -> None:
        if amount < 0:
            raise InvalidConfiguration(
                f"Discount amount must not be negative, got {amount}"
            )
        self.discount_amount = amount

    def update_location(self, location: Location) -> None:
        self.location = location

    def add_ride_to_history(self, ride_id: int) -> None:
        self.ride_history.append(ride_id)


class RideListener(Protocol):
    def handle(self, ride: Ride, new_status: RideStatus) -> None: ...


@dataclass(eq=False)
class Ride:
    id: int
    rider: Rider
    pickup: Location
    drop: Location
    vehicle_type: VehicleType
    driver: Optional[Driver] = None
    status: RideStatus = RideStatus.REQUESTED
    fare: float = 0.0
    paid: bool = False
    distance_km: float = field(init=False)
    _listeners: list[RideListener] = field(
        default_factory=list, init=False, repr=False
    )
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )

    def __post_init__(self) -> None:
        # Fixed for the lifetime of the ride.
        self.distance_km = self.pickup.distance_to(self.drop)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    # ── Listeners ─────────────────────────────────────────────────

    def attach(self, listener: RideListener) -> None:
        self._listeners.append(listener)

    def detach(self, listener: RideListener) -> None:
        self._listeners = [
            attached for attached in self._listeners if attached is not listener
        ]

    @property
    def listeners(self) -> tuple[RideListener, ...]:
        return tuple(self._listeners)

    def notify(self, new_status: RideStatus) -> None:
        """Push *new_status* to every listener in attachment order.

        The transition is already committed when listeners run, so a failing
        listener is logged and the remaining listeners are still notified.
        """
        for listener in list(self._listeners):
            try:
                listener.handle(self, new_status)
            except Exception:
                logger.exception(
                    "Listener %s failed on ride %s -> %s",
                    type(listener).__name__,
                    self.id,
                    new_status.value,
                )

    # ── Transitions ───────────────────────────────────────────────

    def assign_driver(self, driver: Driver) -> None:
        """Bind *driver* and move to DRIVER_ASSIGNED (REQUESTED only)."""
        with self._lock:
            if self.status is not RideStatus.REQUESTED:
                raise InvalidStateTransition(
                    f"Cannot assign a driver to ride {self.id} in status {self.status.value}"
                )
            self.driver = driver
            self._transition(RideStatus.DRIVER_ASSIGNED)

    def update_status(self, new_status: RideStatus | str) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        new_status = RideStatus(new_status)
        with self._lock:
            if new_status is RideStatus.DRIVER_ASSIGNED:
                raise InvalidStateTransition(
                    f"Ride {self.id} enters DRIVER_ASSIGNED only through assign_driver"
                )
            self._transition(new_status)

    def mark_paid(self) -> None:
        """Record a successful settlement (COMPLETED rides only)."""
        with self._lock:
            if self.status is not RideStatus.COMPLETED:
                raise InvalidStateTransition(
                    f"Ride {self.id} cannot be paid in status {self.status.value}"
                )
            self.paid = True

    def _transition(self, new_status: RideStatus) -> None:
        if self.is_terminal:
            raise InvalidStateTransition(
                f"Ride {self.id} is already {self.status.value}; "
                f"cannot move to {new_status.value}"
            )
        allowed = RIDE_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition ride {self.id} from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
        self.notify(new_status)


class RideFactory:
    """Creates rides with fresh, monotonically increasing ids."""

    def __init__(self, start: int = 1):
        self._ids = itertools.count(start)

    def create(self, request: RideRequest) -> Ride:
        return Ride(
            id=next(self._ids),
            rider=request.rider,
            pickup=request.pickup,
            drop=request.drop,
            vehicle_type=request.vehicle_type,
        )
