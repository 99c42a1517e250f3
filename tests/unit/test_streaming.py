"""
Tests for CSV chunk streaming.
"""

import pytest

from obsfilter.adapters.base import EndOfData, QueryError
from obsfilter.observation.reader import ObservationReader
from obsfilter.observation.row_reader import GraphRowReader
from obsfilter.streaming import create_csv_response, iter_csv_chunks


class TestIterCSVChunks:
    """Tests for iter_csv_chunks()."""

    def test_chunks_follow_rows_and_buffer_size(self, make_cursor):
        cursor = make_cursor([["a,b"], ["10,20"]], signal_last=True)
        reader = ObservationReader(GraphRowReader(cursor))

        chunks = list(iter_csv_chunks(reader, 4))

        assert chunks == [b"a,b\n", b"10,2", b"0\n"]
        assert reader.closed
        assert cursor.close_calls == 1

    def test_stops_at_end_of_data(self, make_row_reader):
        row_reader = make_row_reader(lambda: ("", EndOfData()))

        assert list(iter_csv_chunks(ObservationReader(row_reader), 8)) == []
        assert row_reader.close_calls == 1

    def test_error_is_raised_after_delivered_bytes(self, make_cursor):
        error = QueryError("connection lost", engine="fake")
        cursor = make_cursor([["a,b"]])
        reader = ObservationReader(GraphRowReader(cursor))
        chunks = iter_csv_chunks(reader, 16)

        assert next(chunks) == b"a,b\n"
        cursor.error = error
        with pytest.raises(QueryError):
            next(chunks)
        assert cursor.close_calls == 1

    def test_abandoned_stream_closes_reader(self, make_row_reader):
        row_reader = make_row_reader(lambda: ("1,2\n", None))
        chunks = iter_csv_chunks(ObservationReader(row_reader), 16)

        assert next(chunks) == b"1,2\n"
        chunks.close()

        assert row_reader.close_calls == 1


class TestCreateCSVResponse:
    """Tests for create_csv_response()."""

    def test_headers(self, make_cursor):
        reader = ObservationReader(GraphRowReader(make_cursor([])))

        response = create_csv_response(reader, 1024, filename="f1.csv")

        assert response.media_type == "text/csv"
        assert response.headers["content-disposition"] == 'attachment; filename="f1.csv"'
        reader.close()
