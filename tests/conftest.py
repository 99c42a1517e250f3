"""
Pytest configuration and shared fixtures for obsfilter tests.
"""

import pytest
from fastapi.testclient import TestClient

from obsfilter.adapters.base import BaseAdapter, ConnectionError, Cursor, EndOfData
from obsfilter.domain.filter.models import DimensionFilter, Filter
from obsfilter.observation.row_reader import CSVRowReader


class FakeCursor(Cursor):
    """Cursor over a fixed list of records."""

    def __init__(self, records=None, signal_last=False, error=None):
        self.records = list(records or [])
        self.signal_last = signal_last
        self.error = error
        self.position = 0
        self.close_calls = 0

    def next_record(self):
        if self.error is not None:
            raise self.error
        if self.position >= len(self.records):
            raise EndOfData()
        values = self.records[self.position]
        self.position += 1
        is_last = self.signal_last and self.position == len(self.records)
        return values, is_last

    def close(self):
        self.close_calls += 1


class FakeAdapter(BaseAdapter):
    """Adapter recording executed queries and returning a prepared cursor."""

    ENGINE = "fake"

    def __init__(self, cursor=None, error=None, connect_error=None, connected=True):
        super().__init__({})
        self.cursor = cursor if cursor is not None else FakeCursor()
        self.error = error
        self.connect_error = connect_error
        self._connected = connected
        self.queries = []

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        self._connected = True

    def disconnect(self):
        self._connected = False

    def execute(self, query, params=None):
        self.queries.append((query, params))
        if self.error is not None:
            raise self.error
        return self.cursor

    def health_check(self):
        return self._connected


class FakeRowReader(CSVRowReader):
    """Row reader delegating to a read function."""

    def __init__(self, read_func):
        self.read_func = read_func
        self.read_calls = 0
        self.close_calls = 0

    def read(self):
        self.read_calls += 1
        return self.read_func()

    def close(self):
        self.close_calls += 1


@pytest.fixture
def make_cursor():
    """Factory for in-memory cursors."""
    return FakeCursor


@pytest.fixture
def make_adapter():
    """Factory for in-memory adapters."""
    return FakeAdapter


@pytest.fixture
def make_row_reader():
    """Factory for row readers driven by a read function."""
    return FakeRowReader


@pytest.fixture
def unreachable_adapter():
    """Adapter whose database cannot be reached."""
    return FakeAdapter(
        connect_error=ConnectionError("connection refused", engine="fake"),
        connected=False
    )


@pytest.fixture
def dimension_filter():
    """Return the age/sex filter used across query tests."""
    return Filter(
        filter_id="f-123",
        instance_id="888",
        dimension_filters=[
            DimensionFilter(name="age", options=["29", "30"]),
            DimensionFilter(name="sex", options=["male", "female"]),
        ],
    )


@pytest.fixture
def app():
    """Return the FastAPI app with dependency overrides reset afterwards."""
    from obsfilter.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    return TestClient(app)
