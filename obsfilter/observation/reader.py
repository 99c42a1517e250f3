"""
Byte stream over CSV rows.

ObservationReader pulls one row at a time from a CSVRowReader and hands out
its bytes through caller-provided buffers of any size. It is a raw IO
object, so it can be wrapped in io.BufferedReader, passed to
shutil.copyfileobj, or read with read()/readline() directly.
"""

import io
from typing import Optional, Tuple

from obsfilter.adapters.base import EndOfData
from obsfilter.observation.row_reader import CSVRowReader


class ObservationReader(io.RawIOBase):
    """
    Buffered byte reader over a CSVRowReader.

    Invariants:
    - a single read never fetches more than one new row
    - a single read never returns more bytes than the buffer holds
    - a terminal condition fetched with a row is surfaced in the call that
      delivers that row's last byte, and on every call after it
    """

    def __init__(self, row_reader: CSVRowReader):
        super().__init__()
        self._row_reader = row_reader
        self._pending = b""
        self._terminal: Optional[Exception] = None
        self._total_bytes_read = 0
        self._rows_read = 0

    @property
    def total_bytes_read(self) -> int:
        return self._total_bytes_read

    @property
    def rows_read(self) -> int:
        return self._rows_read

    @property
    def observations_count(self) -> int:
        return self._rows_read

    def readable(self) -> bool:
        return True

    def fill(self, buffer) -> Tuple[int, Optional[Exception]]:
        """
        Copy the next bytes of the stream into buffer.

        Returns:
            (n, terminal) where n is the number of bytes written and
            terminal is EndOfData, an error, or None while the stream goes on
        """
        if self.closed:
            raise ValueError("I/O operation on closed reader")

        if not self._pending and self._terminal is None:
            row, self._terminal = self._row_reader.read()
            self._rows_read += 1
            self._pending = row.encode("utf-8")

        if not self._pending:
            return 0, self._terminal

        view = memoryview(buffer).cast("B")
        n = min(len(view), len(self._pending))
        view[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        self._total_bytes_read += n

        if not self._pending and self._terminal is not None:
            return n, self._terminal
        return n, None

    def readinto(self, buffer) -> int:
        """
        Raw IO read: EndOfData reads as EOF (0), any other terminal is raised
        once the bytes before it have been returned.
        """
        n, terminal = self.fill(buffer)
        if n == 0 and terminal is not None and not isinstance(terminal, EndOfData):
            raise terminal
        return n

    def close(self) -> None:
        if not self.closed:
            try:
                self._row_reader.close()
            finally:
                super().close()
