"""
Row readers translating database records into CSV lines.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from obsfilter.adapters.base import AdapterError, Cursor, EndOfData
from obsfilter.observation.errors import NoDataReturned, UnrecognisedType


class CSVRowReader(ABC):
    """Reader of individual rows (lines) of a CSV file."""

    @abstractmethod
    def read(self) -> Tuple[str, Optional[Exception]]:
        """
        Read the next row.

        Returns:
            (row, terminal). The row is newline terminated, or empty when
            nothing was read. terminal is EndOfData or an error when the read
            path is finished; a row and EndOfData may come back together.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class GraphRowReader(CSVRowReader):
    """Reads CSV rows from the first value of each graph database record."""

    def __init__(self, cursor: Cursor):
        self._cursor = cursor

    def read(self) -> Tuple[str, Optional[Exception]]:
        try:
            values, is_last = self._cursor.next_record()
        except (EndOfData, AdapterError) as e:
            return "", e

        if len(values) < 1:
            return "", NoDataReturned()

        csv_row = values[0]
        if not isinstance(csv_row, str):
            return "", UnrecognisedType()

        if is_last:
            return csv_row + "\n", EndOfData()
        return csv_row + "\n", None

    def close(self) -> None:
        self._cursor.close()
