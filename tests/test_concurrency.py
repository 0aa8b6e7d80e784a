"""
Concurrency safety tests.

Demonstrates:
1. Concurrent ride requests never hand the same driver to two rides.
2. Concurrent completions release every driver exactly once.
3. A ride's own lock serialises competing transitions.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from src.domain.entities import Location
from src.domain.enums import DriverStatus, RideStatus, VehicleType
from src.domain.errors import InvalidStateTransition
from src.services.dispatch import DispatchService
from tests.conftest import make_driver, make_rider

PICKUP = Location(12.97, 77.59)
DROP = Location(12.98, 77.60)


class TestConcurrentDispatch:
    def test_no_driver_assigned_twice(self):
        service = DispatchService(listener_factories=[])
        for i in range(5):
            service.register_driver(make_driver(f"D{i}", location=Location(i, i)))

        riders = [make_rider(f"R{i}") for i in range(20)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            rides = list(
                pool.map(
                    lambda r: service.request_ride(r, PICKUP, DROP, VehicleType.SEDAN),
                    riders,
                )
            )

        assigned = [r for r in rides if r.status == RideStatus.DRIVER_ASSIGNED]
        cancelled = [r for r in rides if r.status == RideStatus.CANCELLED]
        assert len(assigned) == 5
        assert len(cancelled) == 15
        assert len({id(r.driver) for r in assigned}) == 5
        assert len(service.pool) == 0
        assert len({r.id for r in rides}) == 20

    def test_concurrent_completion_releases_each_driver_once(self):
        service = DispatchService(listener_factories=[])
        drivers = [
            service.register_driver(make_driver(f"D{i}", location=Location(i, i)))
            for i in range(6)
        ]
        rides = [
            service.request_ride(make_rider(f"R{i}"), PICKUP, DROP, VehicleType.SEDAN)
            for i in range(6)
        ]

        # Each ride is completed from two threads at once; one call must lose.
        ids = [r.id for r in rides] * 2
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(service.complete_ride, ids))

        assert sum(1 for r in results if r is not None) == 6
        assert len(service.pool) == 6
        assert all(d.status == DriverStatus.AVAILABLE for d in drivers)
        assert len(service.completed_rides()) == 6


class TestRideLock:
    def test_competing_terminal_transitions(self):
        service = DispatchService(listener_factories=[])
        service.register_driver(make_driver(location=PICKUP))
        ride = service.request_ride(make_rider(), PICKUP, DROP, VehicleType.SEDAN)

        errors: list[Exception] = []
        barrier = threading.Barrier(2)

        def _move(status: RideStatus) -> None:
            barrier.wait()
            try:
                ride.update_status(status)
            except InvalidStateTransition as exc:
                errors.append(exc)

        threads = [
            threading.Thread(target=_move, args=(RideStatus.COMPLETED,)),
            threading.Thread(target=_move, args=(RideStatus.CANCELLED,)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 1
        assert ride.status in (RideStatus.COMPLETED, RideStatus.CANCELLED)
