"""
FastAPI Dependencies

Reusable dependencies for dependency injection.
"""

import threading

from fastapi import Depends, Request

from obsfilter.adapters.base import BaseAdapter, ConnectionError
from obsfilter.errors import connection_failed
from obsfilter.observation.store import ObservationStore

# Sync routes run in the threadpool; only one of them may reconnect
_connect_lock = threading.Lock()


def get_adapter(request: Request) -> BaseAdapter:
    """
    Return the application's database adapter, connecting lazily if the
    database was unreachable at startup.
    """
    adapter = request.app.state.adapter
    if adapter.is_connected():
        return adapter

    with _connect_lock:
        if not adapter.is_connected():
            try:
                adapter.connect()
            except ConnectionError as e:
                raise connection_failed(
                    adapter.ENGINE,
                    reason=str(e),
                    request_id=getattr(request.state, "request_id", None)
                )
    return adapter


def get_store(adapter: BaseAdapter = Depends(get_adapter)) -> ObservationStore:
    """Get an observation store bound to the application's adapter."""
    return ObservationStore(adapter)
