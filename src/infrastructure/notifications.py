"""
Ride listeners that render status changes as log lines.

Both notifiers are attached to a ride when a driver is matched and receive
every subsequent transition synchronously.
"""

from __future__ import annotations

import logging

from src.domain.entities import Ride
from src.domain.enums import RideStatus

logger = logging.getLogger(__name__)


class RiderNotifier:
    def handle(self, ride: Ride, new_status: RideStatus) -> None:
        logger.info(
            "[Notification to Rider %s]: Ride %s is now %s",
            ride.rider.name,
            ride.id,
            new_status.value,
        )


class DriverNotifier:
    def handle(self, ride: Ride, new_status: RideStatus) -> None:
        if ride.driver is None:
            return
        logger.info(
            "[Notification to Driver %s]: Ride %s is now %s",
            ride.driver.name,
            ride.id,
            new_status.value,
        )
