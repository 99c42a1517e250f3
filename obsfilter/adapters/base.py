"""
Base Adapter Interface for obsfilter

The observation store talks to the graph database only through the
interfaces in this module, so the query builder, row reader and streaming
reader can be exercised against lightweight stand-ins.

DESIGN PRINCIPLES:
-----------------
1. Connection pooling handled by the adapter's driver (not caller)
2. One pooled connection per execute() call, owned by the returned cursor
3. Results are consumed one record at a time (never materialised)
4. Driver errors wrapped in AdapterError for consistent handling
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class AdapterError(Exception):
    """Base exception for adapter errors."""

    def __init__(self, message: str, engine: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.engine = engine
        self.original_error = original_error


class ConnectionError(AdapterError):
    """Failed to connect to database."""
    pass


class QueryError(AdapterError):
    """Query execution or record fetch failed."""
    pass


class EndOfData(Exception):
    """
    Terminal condition: the cursor has no more records.

    Not a failure, but carried through the row path exactly like one.
    """

    def __init__(self, message: str = "end of data"):
        super().__init__(message)


class Cursor(ABC):
    """
    Handle over an in-progress query result, consumed one record at a time.

    A cursor owns the connection it was opened on; close() releases both.
    """

    @abstractmethod
    def next_record(self) -> Tuple[List[Any], bool]:
        """
        Advance by one record.

        Returns:
            (values, is_last) where is_last is True when no further record
            is available after this one

        Raises:
            EndOfData: If there are no more records
            QueryError: If the driver fails to fetch the record
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the cursor and the connection it owns."""
        pass


class BaseAdapter(ABC):
    """
    Abstract base class for graph database adapters.

    Each adapter must implement:
    - connect(): Establish the driver / connection pool
    - disconnect(): Close the driver
    - execute(): Run a query and return a Cursor
    - health_check(): Verify connectivity

    Usage:
        adapter = Neo4jAdapter(config)
        adapter.connect()

        cursor = adapter.execute("MATCH (n) RETURN n.value AS row")
        try:
            values, is_last = cursor.next_record()
        finally:
            cursor.close()

        adapter.disconnect()
    """

    # Engine identifier (e.g., "neo4j")
    ENGINE: str = "base"

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize adapter with connection configuration.

        Args:
            config: Database-specific configuration dict
                    (uri, user, password, database, etc.)
        """
        self.config = config
        self._connected = False
        self._last_used = None

    @abstractmethod
    def connect(self) -> None:
        """
        Establish connection to database.

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """
        Close database connection.

        Should be safe to call even if not connected.
        """
        pass

    @abstractmethod
    def execute(self, query: str, params: Optional[Dict[str, Any]] = None) -> Cursor:
        """
        Execute a query and return a cursor over its records.

        Args:
            query: Query text
            params: Named parameter values

        Returns:
            Cursor owning one pooled connection until closed

        Raises:
            QueryError: If query execution fails
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if connection is alive and usable.

        Returns:
            True if connection is healthy, False otherwise
        """
        pass

    def is_connected(self) -> bool:
        """Check if adapter has an active connection."""
        return self._connected

    def get_engine_info(self) -> Dict[str, Any]:
        """Get information about this adapter/engine."""
        return {
            "engine": self.ENGINE,
            "connected": self._connected,
            "last_used": self._last_used.isoformat() if self._last_used else None
        }

    def _update_last_used(self):
        """Update last used timestamp."""
        self._last_used = datetime.now(timezone.utc)

    def __enter__(self):
        """Context manager support."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager cleanup."""
        self.disconnect()
        return False
