"""
Payment processors.

The dispatch service only needs a yes/no answer: any non-success is a soft
failure that leaves the ride completed but unpaid.  ``DummyPaymentProcessor``
stands in for a real gateway and always succeeds.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from src.domain.entities import Ride

logger = logging.getLogger(__name__)


class PaymentProcessor(ABC):
    @abstractmethod
    def process_payment(self, ride: Ride, amount: float) -> bool: ...


class DummyPaymentProcessor(PaymentProcessor):
    def __init__(self, currency: str = "INR"):
        self.currency = currency

    def process_payment(self, ride: Ride, amount: float) -> bool:
        logger.info(
            "Processing payment of %.2f %s for Ride %s", amount, self.currency, ride.id
        )
        return True
