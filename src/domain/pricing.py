"""
Fare Pipeline  (Strategy Pattern, folded left to right)
=======================================================

Formula
-------
Fare = max(0, (Base_Fare + Distance x Fare_Per_KM) x Surge_Multiplier - Discount)

* **Base_Fare**        = fixed constant (50.0 by default)
* **Fare_Per_KM**      = rate of the assigned driver's vehicle
* **Surge_Multiplier** = applied only while surge is active
* **Discount**         = rider's flat discount, applied only when positive

Each ``PricingStep`` receives the ride and the fare computed so far and
returns a refined fare.  ``FarePipeline`` folds its steps over an
accumulator that starts at 0.0, then rounds to currency precision.  A new
pipeline is built for every completed ride, so no pricing state is shared
between rides.

Complexity: O(k) per fare, k = number of steps (at most 3 here).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import reduce
from typing import Sequence

from .entities import Ride
from .errors import DispatchError, InvalidConfiguration

BASE_FARE = 50.0


# ── Step hierarchy ────────────────────────────────────────────────────


class PricingStep(ABC):
    @abstractmethod
    def apply(self, ride: Ride, fare: float) -> float: ...


class BaseFare(PricingStep):
    """Starts the fare from distance and vehicle rate; ignores *fare*."""

    def __init__(self, base_fare: float = BASE_FARE):
        self.base_fare = base_fare

    def apply(self, ride: Ride, fare: float) -> float:
        if ride.driver is None:
            raise DispatchError(f"Ride {ride.id} has no driver to price against")
        return self.base_fare + ride.distance_km * ride.driver.vehicle.fare_per_km


class SurgeMultiplier(PricingStep):
    def __init__(self, multiplier: float):
        if multiplier <= 0:
            raise InvalidConfiguration(
                f"Surge multiplier must be positive, got {multiplier}"
            )
        self.multiplier = multiplier

    def apply(self, ride: Ride, fare: float) -> float:
        return fare * self.multiplier


class FlatDiscount(PricingStep):
    def __init__(self, amount: float):
        if amount < 0:
            raise InvalidConfiguration(
                f"Discount amount must not be negative, got {amount}"
            )
        self.amount = amount

    def apply(self, ride: Ride, fare: float) -> float:
        return max(0.0, fare - self.amount)


class FarePipeline:
    def __init__(self, steps: Sequence[PricingStep], precision: int = 2):
        self.steps = list(steps)
        self.precision = precision

    def calculate(self, ride: Ride) -> float:
        fare = reduce(lambda acc, step: step.apply(ride, acc), self.steps, 0.0)
        return round(fare, self.precision)


# ── Surge state ───────────────────────────────────────────────────────


@dataclass
class SurgeState:
    active: bool = False
    multiplier: float = 1.0

    def activate(self, multiplier: float) -> None:
        if multiplier <= 0:
            raise InvalidConfiguration(
                f"Surge multiplier must be positive, got {multiplier}"
            )
        self.active = True
        self.multiplier = multiplier

    def deactivate(self) -> None:
        self.active = False
        self.multiplier = 1.0


# ── Engine facade ─────────────────────────────────────────────────────


class PricingEngine:
    """High-level API used by the dispatch service."""

    def __init__(self, base_fare: float = BASE_FARE, precision: int = 2):
        self.base_fare = base_fare
        self.precision = precision

    def pipeline_for(self, ride: Ride, surge: SurgeState) -> FarePipeline:
        """Base -> [Surge if active] -> [Discount if the rider has one]."""
        steps: list[PricingStep] = [BaseFare(self.base_fare)]
        if surge.active:
            steps.append(SurgeMultiplier(surge.multiplier))
        if ride.rider.has_discount:
            steps.append(FlatDiscount(ride.rider.discount_amount))
        return FarePipeline(steps, self.precision)

    def calculate_fare(self, ride: Ride, surge: SurgeState) -> float:
        return self.pipeline_for(ride, surge).calculate(ride)
