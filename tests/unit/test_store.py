"""
Tests for the observation store.
"""

import logging

import pytest

from obsfilter.adapters.base import EndOfData, QueryError
from obsfilter.domain.filter.models import Filter
from obsfilter.domain.query.builder import build_query
from obsfilter.observation.reader import ObservationReader
from obsfilter.observation.store import ObservationStore


class TestGetCSVRows:
    """Tests for ObservationStore.get_csv_rows()."""

    def test_query_sent_without_limit(self, make_adapter, dimension_filter):
        adapter = make_adapter()

        ObservationStore(adapter).get_csv_rows(dimension_filter)

        assert adapter.queries == [(build_query(dimension_filter), None)]

    def test_query_sent_with_limit(self, make_adapter, dimension_filter):
        adapter = make_adapter()

        ObservationStore(adapter).get_csv_rows(dimension_filter, limit=20)

        assert len(adapter.queries) == 1
        assert adapter.queries[0][0].endswith(" LIMIT 20")

    def test_returns_reader_over_cursor(self, make_adapter, make_cursor):
        cursor = make_cursor([["the,csv,row"], ["1,2,3"]], signal_last=True)
        store = ObservationStore(make_adapter(cursor=cursor))

        reader = store.get_csv_rows(Filter(filter_id="1234567890", instance_id="0987654321"))

        assert isinstance(reader, ObservationReader)
        assert reader.read() == b"the,csv,row\n1,2,3\n"
        reader.close()
        assert cursor.close_calls == 1

    def test_empty_result_ends_immediately(self, make_adapter, make_cursor):
        store = ObservationStore(make_adapter(cursor=make_cursor([])))

        reader = store.get_csv_rows(Filter(instance_id="888"))
        n, terminal = reader.fill(bytearray(10))

        assert n == 0
        assert isinstance(terminal, EndOfData)

    def test_execution_error_propagates(self, make_adapter, make_cursor, dimension_filter):
        error = QueryError("Invalid input 'x'", engine="fake")
        cursor = make_cursor()
        store = ObservationStore(make_adapter(cursor=cursor, error=error))

        with pytest.raises(QueryError) as exc_info:
            store.get_csv_rows(dimension_filter)

        assert exc_info.value is error
        assert cursor.close_calls == 0

    def test_query_is_logged(self, make_adapter, dimension_filter, caplog):
        store = ObservationStore(make_adapter())

        with caplog.at_level(logging.INFO, logger="obsfilter.observation.store"):
            store.get_csv_rows(dimension_filter)

        assert "filter_id=f-123" in caplog.text
        assert build_query(dimension_filter) in caplog.text
