"""
Distance calculation over raw coordinate deltas.

Assumption
----------
The dispatch engine compares drivers by straight-line (Euclidean) distance
on the raw latitude / longitude values rather than a great-circle or road
distance.  Only the *ordering* of distances matters for matching, and the
fare uses the same figure as its distance unit, so the simplification keeps
fares deterministic.  A routing-service client could replace this module
without touching the matching or pricing code.

Complexity: O(1) per call.
"""

import math


def euclidean(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the straight-line distance between two coordinate pairs."""
    return math.hypot(lat1 - lat2, lng1 - lng2)
