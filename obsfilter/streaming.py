"""
Streaming Responses for obsfilter

Streams CSV exports straight from an ObservationReader to the HTTP
response, one buffer at a time, so large instances never sit in memory.
"""

import logging
from typing import Iterator, Optional

from fastapi.responses import StreamingResponse

from obsfilter.adapters.base import EndOfData
from obsfilter.observation.reader import ObservationReader

logger = logging.getLogger(__name__)


def iter_csv_chunks(reader: ObservationReader, chunk_size: int) -> Iterator[bytes]:
    """
    Yield the reader's bytes in chunks of at most chunk_size.

    The reader is always closed, whether the stream completes, fails, or the
    consumer stops iterating early.
    """
    buffer = bytearray(chunk_size)
    completed = False

    try:
        while True:
            n, terminal = reader.fill(buffer)
            if n:
                yield bytes(buffer[:n])
            if terminal is None:
                continue
            if isinstance(terminal, EndOfData):
                completed = True
                break
            logger.error(
                f"CSV stream failed after {reader.rows_read} rows: "
                f"{type(terminal).__name__}: {terminal}"
            )
            raise terminal
    finally:
        reader.close()
        logger.info(
            f"CSV stream {'completed' if completed else 'closed'} | "
            f"rows={reader.rows_read} bytes={reader.total_bytes_read}"
        )


def create_csv_response(
    reader: ObservationReader,
    chunk_size: int,
    filename: Optional[str] = None
) -> StreamingResponse:
    """Create a streaming CSV response."""
    headers = {}
    if filename:
        headers["Content-Disposition"] = f'attachment; filename="{filename}"'

    return StreamingResponse(
        iter_csv_chunks(reader, chunk_size),
        media_type="text/csv",
        headers=headers,
    )
