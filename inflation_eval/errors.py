"""Exception types raised by the CPI containers and resampling engine."""
from __future__ import annotations


class CPIDataError(ValueError):
    """Base class for malformed CPI data or invalid operations on it."""


class ShapeMismatch(CPIDataError):
    """Row or column counts of paired inputs disagree."""


class UnknownItem(CPIDataError):
    """A weights-table key has no matching data column."""


class IndexOutOfRange(CPIDataError, IndexError):
    """A base lookup fell outside a country structure."""


class EmptyRange(CPIDataError):
    """A date slice left no periods."""


class UnsupportedInputLength(CPIDataError):
    """A resampling method got an input length it cannot handle."""
