"""
Database Adapters for obsfilter

This package provides the graph database collaborator used by the
observation store. Each adapter handles:
- Connection management (pooling is delegated to the driver)
- Query execution
- Record-at-a-time cursors

Supported Engines:
- Neo4j
"""

from obsfilter.adapters.base import (
    AdapterError,
    BaseAdapter,
    ConnectionError,
    Cursor,
    EndOfData,
    QueryError,
)
from obsfilter.adapters.neo4j_adapter import Neo4jAdapter, Neo4jCursor

__all__ = [
    "AdapterError",
    "BaseAdapter",
    "ConnectionError",
    "Cursor",
    "EndOfData",
    "QueryError",
    "Neo4jAdapter",
    "Neo4jCursor",
]
