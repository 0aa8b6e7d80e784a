"""
Driver pool -- the set of drivers currently eligible for matching.

A driver is a member of the pool iff its status is AVAILABLE, as long as
callers only move drivers in and out through this class.  Registration is
not deduplicated: registering the same driver twice leaves two entries.
"""

from __future__ import annotations

from typing import Iterator

from .entities import Driver
from .enums import DriverStatus, VehicleType


class EligibleDrivers:
    """Lazy, restartable view of available pool members of one vehicle type.

    Each iteration walks the pool as it is at that moment, in insertion
    order.
    """

    def __init__(self, pool: DriverPool, vehicle_type: VehicleType):
        self._pool = pool
        self.vehicle_type = VehicleType(vehicle_type)

    def __iter__(self) -> Iterator[Driver]:
        for driver in self._pool:
            if (
                driver.status is DriverStatus.AVAILABLE
                and driver.vehicle.vehicle_type == self.vehicle_type
            ):
                yield driver


class DriverPool:
    def __init__(self) -> None:
        self._drivers: list[Driver] = []

    def __iter__(self) -> Iterator[Driver]:
        return iter(self._drivers)

    def __len__(self) -> int:
        return len(self._drivers)

    def __contains__(self, driver: object) -> bool:
        return any(d is driver for d in self._drivers)

    def register(self, driver: Driver) -> None:
        driver.status = DriverStatus.AVAILABLE
        self._drivers.append(driver)

    def deregister(self, driver: Driver) -> None:
        driver.status = DriverStatus.OFFLINE
        self._remove(driver)

    def release(self, driver: Driver) -> None:
        """Return *driver* to the pool after a ride ends."""
        driver.status = DriverStatus.AVAILABLE
        self._drivers.append(driver)

    def withdraw(self, driver: Driver) -> None:
        """Take *driver* out of the pool without touching its status."""
        self._remove(driver)

    def eligible_for(self, vehicle_type: VehicleType) -> EligibleDrivers:
        return EligibleDrivers(self, vehicle_type)

    def available(self) -> list[Driver]:
        return [d for d in self._drivers if d.status is DriverStatus.AVAILABLE]

    def _remove(self, driver: Driver) -> None:
        self._drivers = [d for d in self._drivers if d is not driver]
