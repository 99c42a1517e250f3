"""
Neo4j Adapter for obsfilter

Observation, dimension option and instance nodes live in Neo4j. The official
driver keeps its own connection pool; every execute() call borrows one pooled
connection through a session, and the returned cursor hands it back when it
is closed.

Features:
- Driver-managed connection pooling
- Record-at-a-time consumption with last-record detection
- Driver errors wrapped in QueryError / ConnectionError
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from obsfilter.adapters.base import (
    BaseAdapter,
    ConnectionError,
    Cursor,
    EndOfData,
    QueryError,
)

logger = logging.getLogger(__name__)


class Neo4jCursor(Cursor):
    """
    Cursor over a neo4j Result.

    Owns the session the result was produced on.
    """

    ENGINE = "neo4j"

    def __init__(self, session, result):
        self._session = session
        self._result = result
        self._closed = False

    def next_record(self) -> Tuple[List[Any], bool]:
        try:
            records = self._result.fetch(1)
            if not records:
                raise EndOfData()
            is_last = self._result.peek() is None
        except (Neo4jError, DriverError) as e:
            raise QueryError(
                f"Neo4j record fetch failed: {e}",
                engine=self.ENGINE,
                original_error=e
            )

        return list(records[0].values()), is_last

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._session.close()


class Neo4jAdapter(BaseAdapter):
    """
    Adapter for the Neo4j graph database.

    Config options:
        uri: Bolt / neo4j URI (required)
        user: Username (optional, no auth when absent)
        password: Password
        database: Database name (default: driver default database)
        max_connection_pool_size: Pool size (default: 50)
        connection_acquisition_timeout: Seconds to wait for a pooled
            connection (default: 30)

    Example:
        adapter = Neo4jAdapter({
            "uri": "bolt://localhost:7687",
            "user": "neo4j",
            "password": "secret"
        })
        adapter.connect()
        cursor = adapter.execute("MATCH (i:`_888_Instance`) RETURN i.header as row")
    """

    ENGINE = "neo4j"

    def __init__(self, config: Dict[str, Any]):
        """Initialize Neo4j adapter."""
        super().__init__(config)

        if not config.get("uri"):
            raise ConnectionError(
                "Missing required config: uri",
                engine=self.ENGINE
            )

        self.uri = config["uri"]
        self.user = config.get("user")
        self.password = config.get("password")
        self.database = config.get("database") or None
        self.max_connection_pool_size = config.get("max_connection_pool_size", 50)
        self.connection_acquisition_timeout = config.get("connection_acquisition_timeout", 30)

        self._driver = None

    @classmethod
    def from_settings(cls, settings) -> "Neo4jAdapter":
        """Build an adapter from application settings."""
        return cls({
            "uri": settings.neo4j_uri,
            "user": settings.neo4j_user,
            "password": settings.neo4j_password,
            "database": settings.neo4j_database,
            "max_connection_pool_size": settings.neo4j_pool_size,
            "connection_acquisition_timeout": settings.neo4j_acquisition_timeout,
        })

    def connect(self) -> None:
        """
        Create the driver and verify the server is reachable.

        No-op when already connected; a stale driver is closed first.
        """
        if self._connected and self._driver is not None:
            return
        if self._driver is not None:
            self.disconnect()

        auth = (self.user, self.password) if self.user else None

        try:
            self._driver = GraphDatabase.driver(
                self.uri,
                auth=auth,
                max_connection_pool_size=self.max_connection_pool_size,
                connection_acquisition_timeout=self.connection_acquisition_timeout,
            )
            self._driver.verify_connectivity()
        except (Neo4jError, DriverError) as e:
            if self._driver is not None:
                self._driver.close()
                self._driver = None
            raise ConnectionError(
                f"Failed to connect to Neo4j: {e}",
                engine=self.ENGINE,
                original_error=e
            )

        self._connected = True
        logger.info(f"Neo4j connected: {self.uri}")

    def disconnect(self) -> None:
        """Close the driver and its connection pool."""
        try:
            if self._driver:
                self._driver.close()
        except (Neo4jError, DriverError) as e:
            logger.warning(f"Error closing Neo4j driver: {e}")
        finally:
            self._driver = None
            self._connected = False

    def execute(self, query: str, params: Optional[Dict[str, Any]] = None) -> Neo4jCursor:
        """
        Run a query on a fresh session.

        The session is handed to the returned cursor; it is closed here only
        when the query itself fails.
        """
        if not self._connected:
            raise QueryError(
                "Not connected to Neo4j",
                engine=self.ENGINE
            )

        self._update_last_used()
        session = None

        try:
            session = self._driver.session(database=self.database)
            result = session.run(query, params or {})
        except (Neo4jError, DriverError) as e:
            if session is not None:
                session.close()
            raise QueryError(
                f"Neo4j query failed: {e}",
                engine=self.ENGINE,
                original_error=e
            )

        return Neo4jCursor(session, result)

    def health_check(self) -> bool:
        """Check Neo4j connectivity."""
        if not self._connected:
            return False

        try:
            self._driver.verify_connectivity()
            return True
        except (Neo4jError, DriverError):
            return False
