"""src/birthcast/common/errors.py

Error kinds raised by the series, decomposition and modeling layers.

Input problems derive from ValueError so callers that already guard against
bad data with ``except ValueError`` keep working.
"""

from __future__ import annotations


class BirthcastError(Exception):
    """Base class for all birthcast errors."""


class MalformedSeries(BirthcastError, ValueError):
    """Periods are not contiguous, lengths differ, or a value is not finite."""


class OutOfRange(BirthcastError, ValueError):
    """A requested period lies outside the series."""


class EmptySplit(BirthcastError, ValueError):
    """A split would leave the train or the test side empty."""


class InsufficientData(BirthcastError, ValueError):
    """Too little history for the requested window."""


class InsufficientSeasonalHistory(InsufficientData):
    """Fewer observations than the seasonal model needs."""


class NoOverlap(BirthcastError, ValueError):
    """Forecast and actual series share no periods."""


class NonConvergent(BirthcastError, RuntimeError):
    """The optimizer exhausted its iteration budget."""
