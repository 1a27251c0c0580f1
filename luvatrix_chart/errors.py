from __future__ import annotations


class ChartError(Exception):
    """Base error for chart surface operations."""


class CapabilityError(ChartError):
    """Raised when an object lacks the capability an operation requires."""


class ChartObjectError(ChartError, ValueError):
    """Raised for invalid chart object arguments or membership violations."""


class ScaleError(ChartError, ValueError):
    """Raised when a view scale would not be a positive finite number."""
