"""
Driver Matching Policies  (Strategy Pattern)
============================================

Each policy picks at most one driver from the eligible sequence produced by
``DriverPool.eligible_for``.  An empty sequence yields ``None`` -- "no
match" is a legitimate outcome, not an error.

* **Nearest**    -- minimum Euclidean distance from driver to pickup.
* **BestRated**  -- maximum driver rating.

Ties are resolved in favour of the driver encountered first, i.e. pool
insertion order; there is no secondary tie-break.

Complexity: O(n) per selection, n = eligible drivers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .entities import Driver, RideRequest
from .errors import InvalidConfiguration


# ── Strategy hierarchy ────────────────────────────────────────────────


class MatchingPolicy(ABC):
    name: str = ""

    @abstractmethod
    def choose_driver(
        self, request: RideRequest, drivers: Iterable[Driver]
    ) -> Optional[Driver]: ...


class NearestDriverPolicy(MatchingPolicy):
    name = "nearest"

    def choose_driver(
        self, request: RideRequest, drivers: Iterable[Driver]
    ) -> Optional[Driver]:
        nearest: Optional[Driver] = None
        min_distance = float("inf")
        for driver in drivers:
            distance = driver.location.distance_to(request.pickup)
            if distance < min_distance:
                min_distance = distance
                nearest = driver
        return nearest


class BestRatedDriverPolicy(MatchingPolicy):
    name = "best_rated"

    def choose_driver(
        self, request: RideRequest, drivers: Iterable[Driver]
    ) -> Optional[Driver]:
        best: Optional[Driver] = None
        for driver in drivers:
            if best is None or driver.rating > best.rating:
                best = driver
        return best


# ── Registry ──────────────────────────────────────────────────────────


POLICIES: dict[str, type[MatchingPolicy]] = {
    NearestDriverPolicy.name: NearestDriverPolicy,
    BestRatedDriverPolicy.name: BestRatedDriverPolicy,
}


def policy_from_name(name: str) -> MatchingPolicy:
    """Instantiate the policy registered under *name*."""
    try:
        return POLICIES[name.lower()]()
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown matching policy {name!r}; expected one of {sorted(POLICIES)}"
        ) from None
