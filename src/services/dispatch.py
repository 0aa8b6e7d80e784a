"""
Dispatch Service
================

Orchestrates one ride from request to settlement:

1. Build a ``RideRequest`` and create the ``Ride`` through the factory.
2. Ask the active ``MatchingPolicy`` for a driver among the eligible pool
   members.  No match cancels the ride and hands it back to the caller.
3. On a match, attach the rider / driver notifiers, assign the driver and
   withdraw it from the pool.
4. Forward status updates to the ride's state machine.
5. On completion, price the ride through a fresh fare pipeline, settle it
   with the payment processor, release the driver and archive the ride.

Concurrency safety
------------------
Every public operation runs under one re-entrant lock (single writer), so
driver selection and withdraw-on-match are a single atomic unit and no
driver is handed to two concurrent requests.  Rides additionally guard
their own transitions; the lock order is always service, then ride.

Expected conditions (unknown ride id, no eligible driver, failed payment)
are logged and reported through return values.  Contract violations
(``InvalidStateTransition``, ``InvalidConfiguration``) propagate.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Iterable, Optional

from src.config import Settings
from src.domain.entities import (
    Driver,
    Location,
    Ride,
    RideFactory,
    RideListener,
    RideRequest,
    Rider,
)
from src.domain.enums import DriverStatus, RideStatus, VehicleType
from src.domain.matching import MatchingPolicy, NearestDriverPolicy, policy_from_name
from src.domain.pool import DriverPool
from src.domain.pricing import PricingEngine, SurgeState
from src.infrastructure.notifications import DriverNotifier, RiderNotifier
from src.infrastructure.payments import DummyPaymentProcessor, PaymentProcessor

logger = logging.getLogger(__name__)

ListenerFactory = Callable[[], RideListener]


class DispatchService:
    def __init__(
        self,
        policy: Optional[MatchingPolicy] = None,
        payment_processor: Optional[PaymentProcessor] = None,
        pricing: Optional[PricingEngine] = None,
        listener_factories: Optional[Iterable[ListenerFactory]] = None,
        currency: str = "INR",
    ):
        self.pool = DriverPool()
        self.surge = SurgeState()
        self.pricing = pricing or PricingEngine()
        self.payments = payment_processor or DummyPaymentProcessor(currency)
        self.currency = currency
        self.listener_factories: tuple[ListenerFactory, ...] = tuple(
            listener_factories
            if listener_factories is not None
            else (RiderNotifier, DriverNotifier)
        )
        self._policy: MatchingPolicy = policy or NearestDriverPolicy()
        self._factory = RideFactory()
        self._lock = threading.RLock()

        # Ride arena: every ride ever created, keyed by id.
        self._rides: dict[int, Ride] = {}
        self._in_flight: dict[int, Ride] = {}
        self._archived: list[Ride] = []

        self._drivers: dict[int, Driver] = {}
        self._riders: dict[int, Rider] = {}
        self._driver_ids = itertools.count(1)
        self._rider_ids = itertools.count(1)

    # ── Configuration ─────────────────────────────────────────────

    @property
    def matching_policy(self) -> MatchingPolicy:
        return self._policy

    def set_matching_policy(self, policy: MatchingPolicy) -> None:
        """Swap the policy used by later requests; assigned rides keep their driver."""
        with self._lock:
            self._policy = policy
        logger.info("Matching policy set to %s", type(policy).__name__)

    def activate_surge(self, multiplier: float) -> None:
        with self._lock:
            self.surge.activate(multiplier)
        logger.info("Surge pricing activated (%sx)", multiplier)

    def deactivate_surge(self) -> None:
        with self._lock:
            self.surge.deactivate()
        logger.info("Surge pricing deactivated")

    # ── Drivers & riders ──────────────────────────────────────────

    def register_driver(self, driver: Driver) -> Driver:
        """Add *driver* to the directory and the pool as AVAILABLE.

        Re-registering a driver whose ride is still in flight puts them back
        in the pool; they can then be matched again and are released a
        second time when the first ride ends.
        """
        with self._lock:
            if driver.id is None:
                driver.id = next(self._driver_ids)
            self._drivers[driver.id] = driver
            self.pool.register(driver)
        logger.info("Driver registered: %s", driver)
        return driver

    def deregister_driver(self, driver: Driver) -> None:
        with self._lock:
            self.pool.deregister(driver)
        logger.info("Driver deregistered: %s", driver)

    def update_driver(
        self,
        driver: Driver,
        location: Optional[Location] = None,
        rating: Optional[float] = None,
    ) -> Driver:
        """Move and/or re-rate *driver*; later matches see the new values."""
        with self._lock:
            if rating is not None:
                driver.set_rating(rating)
            if location is not None:
                driver.update_location(location)
        logger.info("Driver updated: %s", driver)
        return driver

    def get_driver(self, driver_id: int) -> Optional[Driver]:
        return self._drivers.get(driver_id)

    def available_drivers(self) -> list[Driver]:
        with self._lock:
            return self.pool.available()

    def add_rider(self, rider: Rider) -> Rider:
        with self._lock:
            if rider.id is None:
                rider.id = next(self._rider_ids)
            self._riders[rider.id] = rider
        return rider

    def get_rider(self, rider_id: int) -> Optional[Rider]:
        return self._riders.get(rider_id)

    # ── Rides ─────────────────────────────────────────────────────

    def request_ride(
        self,
        rider: Rider,
        pickup: Location,
        drop: Location,
        vehicle_type: VehicleType | str,
    ) -> Ride:
        vehicle_type = VehicleType(vehicle_type)
        logger.info(
            "=== Rider %s requests a %s ride ===", rider.name, vehicle_type.value
        )
        request = RideRequest(rider, pickup, drop, vehicle_type)

        with self._lock:
            if rider.id is None or rider.id not in self._riders:
                self.add_rider(rider)
            ride = self._factory.create(request)
            self._rides[ride.id] = ride
            rider.add_ride_to_history(ride.id)

            driver = self._policy.choose_driver(
                request, self.pool.eligible_for(vehicle_type)
            )
            if driver is None:
                logger.info(
                    "No available drivers for Ride %s. Cancelling ride.", ride.id
                )
                ride.update_status(RideStatus.CANCELLED)
                self._archived.append(ride)
                return ride

            for make_listener in self.listener_factories:
                ride.attach(make_listener())
            ride.assign_driver(driver)

            driver.status = DriverStatus.ON_TRIP
            self.pool.withdraw(driver)
            self._in_flight[ride.id] = ride
        return ride

    def update_ride_status(
        self, ride_id: int, new_status: RideStatus | str
    ) -> Optional[Ride]:
        """Forward *new_status* to an in-flight ride.

        Terminal statuses go through ``complete_ride`` / ``cancel_ride`` so
        the fare, the driver and the archive are always settled.
        """
        new_status = RideStatus(new_status)
        with self._lock:
            ride = self._lookup_in_flight(ride_id)
            if ride is None:
                return None
            if new_status is RideStatus.COMPLETED:
                return self.complete_ride(ride_id)
            if new_status is RideStatus.CANCELLED:
                return self.cancel_ride(ride_id)
            ride.update_status(new_status)
            return ride

    def complete_ride(self, ride_id: int) -> Optional[Ride]:
        with self._lock:
            ride = self._lookup_in_flight(ride_id)
            if ride is None:
                return None

            # 1. Mark completed
            ride.update_status(RideStatus.COMPLETED)

            # 2. Fare calculation
            ride.fare = self.pricing.calculate_fare(ride, self.surge)

            # 3. Payment
            if self._settle(ride):
                ride.mark_paid()
                logger.info(
                    "[Notification to Rider %s]: Payment of %.2f %s successful.",
                    ride.rider.name,
                    ride.fare,
                    self.currency,
                )
            else:
                logger.warning("Payment failed for Ride %s", ride.id)

            # 4. Free up driver, 5. archive
            self._release_driver(ride)
            self._archive(ride)
            logger.info("Ride %s completed and archived.", ride.id)
            return ride

    def cancel_ride(self, ride_id: int) -> Optional[Ride]:
        """Cancel an in-flight ride; its driver goes back to the pool unpaid."""
        with self._lock:
            ride = self._lookup_in_flight(ride_id)
            if ride is None:
                return None
            ride.update_status(RideStatus.CANCELLED)
            self._release_driver(ride)
            self._archive(ride)
            logger.info("Ride %s cancelled and archived.", ride.id)
            return ride

    def get_ride(self, ride_id: int) -> Optional[Ride]:
        return self._rides.get(ride_id)

    def in_flight_rides(self) -> list[Ride]:
        with self._lock:
            return list(self._in_flight.values())

    def completed_rides(self) -> list[Ride]:
        with self._lock:
            return list(self._archived)

    def ride_history(self, rider: Rider) -> list[Ride]:
        return [self._rides[ride_id] for ride_id in rider.ride_history]

    # ── Internals ─────────────────────────────────────────────────

    def _lookup_in_flight(self, ride_id: int) -> Optional[Ride]:
        ride = self._in_flight.get(ride_id)
        if ride is None:
            logger.warning("Ride %s not found or already completed.", ride_id)
        return ride

    def _settle(self, ride: Ride) -> bool:
        try:
            return bool(self.payments.process_payment(ride, ride.fare))
        except Exception:
            logger.exception("Payment processor error for Ride %s", ride.id)
            return False

    def _release_driver(self, ride: Ride) -> None:
        driver = ride.driver
        if driver is None:
            return
        self.pool.release(driver)
        logger.info("Driver %s is now AVAILABLE.", driver.name)

    def _archive(self, ride: Ride) -> None:
        self._in_flight.pop(ride.id, None)
        self._archived.append(ride)


def build_dispatch_service(config: Settings) -> DispatchService:
    """Construct a service from application settings."""
    service = DispatchService(
        policy=policy_from_name(config.matching_policy),
        pricing=PricingEngine(config.base_fare, config.fare_precision),
        currency=config.currency,
    )
    if config.surge_active:
        service.activate_surge(config.surge_multiplier)
    return service
