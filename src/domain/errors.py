"""Exceptions raised by the dispatch domain for caller contract violations."""


class DispatchError(Exception):
    """Base class for dispatch domain errors."""


class InvalidStateTransition(DispatchError):
    """Raised when a ride status change violates the state machine."""


class InvalidConfiguration(DispatchError, ValueError):
    """Raised when a surge multiplier, discount or policy name is invalid."""
