"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from src.domain.entities import Driver, Location, Ride, Rider, Vehicle
from src.domain.enums import DriverStatus, RideStatus, VehicleType


# ── Shared ────────────────────────────────────────────────────────────


class LocationSchema(BaseModel):
    latitude: float
    longitude: float

    model_config = {"from_attributes": True}

    def to_domain(self) -> Location:
        return Location(self.latitude, self.longitude)


class VehicleSchema(BaseModel):
    plate_number: str = Field(..., min_length=1, max_length=20)
    vehicle_type: VehicleType
    capacity: int = Field(..., ge=1, le=8)
    fare_per_km: float = Field(..., gt=0)

    model_config = {"from_attributes": True}

    def to_domain(self) -> Vehicle:
        return Vehicle(
            plate_number=self.plate_number,
            vehicle_type=self.vehicle_type,
            capacity=self.capacity,
            fare_per_km=self.fare_per_km,
        )


# ── Requests ──────────────────────────────────────────────────────────


class DriverCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    phone: str = Field(..., min_length=1, max_length=20)
    vehicle: VehicleSchema
    location: LocationSchema
    rating: float = Field(5.0, ge=0, le=5)


class DriverUpdateRequest(BaseModel):
    location: Optional[LocationSchema] = None
    rating: Optional[float] = Field(None, ge=0, le=5)


class RiderCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    phone: str = Field(..., min_length=1, max_length=20)
    location: LocationSchema
    discount_amount: float = 0.0


class DiscountUpdateRequest(BaseModel):
    amount: float = Field(..., description="Flat discount; 0 removes it.")


class RideCreateRequest(BaseModel):
    rider_id: int
    pickup: LocationSchema
    drop: LocationSchema
    vehicle_type: VehicleType


class RideStatusUpdateRequest(BaseModel):
    status: RideStatus


class SurgeRequest(BaseModel):
    multiplier: float


class MatchingPolicyRequest(BaseModel):
    policy: str = Field(..., description="nearest | best_rated")


# ── Responses ─────────────────────────────────────────────────────────


class DriverResponse(BaseModel):
    id: int
    name: str
    phone: str
    vehicle: VehicleSchema
    location: LocationSchema
    rating: float
    status: DriverStatus

    model_config = {"from_attributes": True}

    @classmethod
    def from_domain(cls, driver: Driver) -> DriverResponse:
        return cls.model_validate(driver)


class RiderResponse(BaseModel):
    id: int
    name: str
    phone: str
    location: LocationSchema
    discount_amount: float
    ride_history: list[int] = []

    model_config = {"from_attributes": True}

    @classmethod
    def from_domain(cls, rider: Rider) -> RiderResponse:
        return cls.model_validate(rider)


class RideResponse(BaseModel):
    id: int
    rider_id: int
    driver_id: Optional[int] = None
    pickup: LocationSchema
    drop: LocationSchema
    vehicle_type: VehicleType
    status: RideStatus
    distance_km: float
    fare: float
    paid: bool

    @classmethod
    def from_domain(cls, ride: Ride) -> RideResponse:
        return cls(
            id=ride.id,
            rider_id=ride.rider.id,
            driver_id=ride.driver.id if ride.driver else None,
            pickup=LocationSchema.model_validate(ride.pickup),
            drop=LocationSchema.model_validate(ride.drop),
            vehicle_type=ride.vehicle_type,
            status=ride.status,
            distance_km=ride.distance_km,
            fare=ride.fare,
            paid=ride.paid,
        )


class SurgeResponse(BaseModel):
    active: bool
    multiplier: float

    model_config = {"from_attributes": True}


class MatchingPolicyResponse(BaseModel):
    policy: str


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
