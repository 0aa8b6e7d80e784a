"""
Seed script -- registers the demo fleet and replays a sample day.

Run:
    python seed.py

Creates:
  - 4 drivers (two sedans, one SUV, one auto) around central Bengaluru
  - 2 riders
and walks through:
  - a SEDAN ride matched by the nearest-driver policy, completed under
    1.5x surge
  - a switch to the best-rated policy and an SUV ride completed after it

``seed_fleet`` is also used by the API on startup when
``SEED_DEMO_FLEET=true``.
"""

import logging

from src.config import settings
from src.domain.entities import Driver, Location, Rider, Vehicle
from src.domain.enums import RideStatus, VehicleType
from src.domain.matching import BestRatedDriverPolicy
from src.services.dispatch import DispatchService, build_dispatch_service

logger = logging.getLogger("seed")


DRIVERS = [
    {"name": "Alice", "phone": "9999990001", "plate": "KA-01-1234", "vehicle_type": VehicleType.SEDAN, "capacity": 4, "fare_per_km": 15.0, "lat": 12.9716, "lng": 77.5946, "rating": 4.8},
    {"name": "Bob", "phone": "9999990002", "plate": "KA-01-5678", "vehicle_type": VehicleType.SEDAN, "capacity": 4, "fare_per_km": 15.0, "lat": 12.9750, "lng": 77.5900, "rating": 4.9},
    {"name": "Charlie", "phone": "9999990003", "plate": "KA-02-1122", "vehicle_type": VehicleType.SUV, "capacity": 6, "fare_per_km": 20.0, "lat": 12.9700, "lng": 77.6000, "rating": 4.7},
    {"name": "Dave", "phone": "9999990004", "plate": "KA-02-3344", "vehicle_type": VehicleType.AUTO, "capacity": 3, "fare_per_km": 10.0, "lat": 12.9720, "lng": 77.5950, "rating": 4.5},
]

RIDERS = [
    {"name": "Eve", "phone": "8888880001", "lat": 12.9725, "lng": 77.5930},
    {"name": "Frank", "phone": "8888880002", "lat": 12.9740, "lng": 77.5960},
]


def seed_fleet(dispatch: DispatchService) -> list[Driver]:
    """Register every demo driver with *dispatch*."""
    drivers = []
    for d in DRIVERS:
        vehicle = Vehicle(
            plate_number=d["plate"],
            vehicle_type=d["vehicle_type"],
            capacity=d["capacity"],
            fare_per_km=d["fare_per_km"],
        )
        driver = Driver(
            name=d["name"],
            phone=d["phone"],
            vehicle=vehicle,
            location=Location(d["lat"], d["lng"]),
            rating=d["rating"],
        )
        drivers.append(dispatch.register_driver(driver))
    logger.info("Registered %d demo drivers", len(drivers))
    return drivers


def seed_riders(dispatch: DispatchService) -> list[Rider]:
    riders = []
    for r in RIDERS:
        rider = Rider(name=r["name"], phone=r["phone"], location=Location(r["lat"], r["lng"]))
        riders.append(dispatch.add_rider(rider))
    logger.info("Created %d demo riders", len(riders))
    return riders


def _log_available(dispatch: DispatchService) -> None:
    logger.info("--- Available Drivers ---")
    for driver in dispatch.available_drivers():
        logger.info("%s", driver)
    logger.info("-------------------------")


def run_demo(dispatch: DispatchService) -> None:
    seed_fleet(dispatch)
    eve, frank = seed_riders(dispatch)
    _log_available(dispatch)

    ride1 = dispatch.request_ride(
        eve, Location(12.9725, 77.5930), Location(12.9850, 77.5950), VehicleType.SEDAN
    )
    dispatch.update_ride_status(ride1.id, RideStatus.EN_ROUTE_TO_PICKUP)
    dispatch.update_ride_status(ride1.id, RideStatus.IN_PROGRESS)

    dispatch.activate_surge(1.5)
    dispatch.complete_ride(ride1.id)
    _log_available(dispatch)

    dispatch.set_matching_policy(BestRatedDriverPolicy())
    ride2 = dispatch.request_ride(
        frank, Location(12.9740, 77.5960), Location(12.9800, 77.6000), VehicleType.SUV
    )
    dispatch.update_ride_status(ride2.id, RideStatus.EN_ROUTE_TO_PICKUP)
    dispatch.update_ride_status(ride2.id, RideStatus.IN_PROGRESS)
    dispatch.complete_ride(ride2.id)
    _log_available(dispatch)

    for ride in dispatch.completed_rides():
        logger.info(
            "Ride %s: %s, fare %.2f %s, paid=%s",
            ride.id,
            ride.status.value,
            ride.fare,
            settings.currency,
            ride.paid,
        )


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    print("Seeding demo dispatch...")
    run_demo(build_dispatch_service(settings))
    print("\nDemo complete!")
