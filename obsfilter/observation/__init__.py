"""
Observation Export

Row readers, the streaming byte reader, and the store tying them to the
graph database.
"""

from obsfilter.observation.errors import (
    EndOfData,
    NoDataReturned,
    ObservationError,
    UnrecognisedType,
)
from obsfilter.observation.reader import ObservationReader
from obsfilter.observation.row_reader import CSVRowReader, GraphRowReader
from obsfilter.observation.store import ObservationStore

__all__ = [
    "EndOfData",
    "NoDataReturned",
    "ObservationError",
    "UnrecognisedType",
    "ObservationReader",
    "CSVRowReader",
    "GraphRowReader",
    "ObservationStore",
]
