"""
Terminal conditions of the observation row path.

Every read path ends in exactly one of these, or in an AdapterError raised
by the cursor. EndOfData is the normal ending.
"""

from obsfilter.adapters.base import EndOfData


class ObservationError(Exception):
    """Base exception for malformed observation rows."""
    pass


class NoDataReturned(ObservationError):
    """A database record had no values."""

    def __init__(self, message: str = "no data returned in this row"):
        super().__init__(message)


class UnrecognisedType(ObservationError):
    """The first value of a database record was not a string."""

    def __init__(self, message: str = "the value returned was not a string"):
        super().__init__(message)


__all__ = ["EndOfData", "ObservationError", "NoDataReturned", "UnrecognisedType"]
