"""
obsfilter - Main Application

Streams filtered observation data out of the graph store as CSV.

PRODUCTION FEATURES:
--------------------
- Incremental CSV streaming (rows never materialised in memory)
- Pooled Neo4j connections, one per export, released when the stream ends
- Structured error responses
- Structured Logging (request tracing)
"""

import uuid
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool

from obsfilter.adapters.base import ConnectionError
from obsfilter.adapters.neo4j_adapter import Neo4jAdapter
from obsfilter.api.routes import router as observations_router
from obsfilter.core.config import settings
from obsfilter.errors import install_error_handlers


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Add request_id filter
class RequestIdFilter(logging.Filter):
    def filter(self, record):
        if not hasattr(record, 'request_id'):
            record.request_id = '-'
        return True

for handler in logging.root.handlers:
    handler.addFilter(RequestIdFilter())

logger = logging.getLogger(__name__)


# =============================================================================
# STARTUP & SHUTDOWN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the database adapter on startup and close it on shutdown."""
    adapter = app.state.adapter
    try:
        await run_in_threadpool(adapter.connect)
    except ConnectionError as e:
        # Retried lazily on the first export request
        logger.warning(f"Neo4j unavailable at startup: {e}")

    logger.info("Startup completed")
    yield

    await run_in_threadpool(adapter.disconnect)
    logger.info("Shutdown completed")


# =============================================================================
# APPLICATION INITIALIZATION
# =============================================================================

app = FastAPI(
    title="obsfilter API",
    version=settings.app_version,
    description="Filtered observation CSV exports from the graph store",
    lifespan=lifespan,
)

app.state.adapter = Neo4jAdapter.from_settings(settings)

install_error_handlers(app)


# =============================================================================
# MIDDLEWARE
# =============================================================================

# Request ID middleware for tracing
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID for tracing and structured logging."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
    request.state.request_id = request_id

    # Add to logging context
    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        record.request_id = request_id
        return record

    logging.setLogRecordFactory(record_factory)

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    logging.setLogRecordFactory(old_factory)
    return response


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(
    observations_router,
    prefix="/v1",
)


# =============================================================================
# PUBLIC ENDPOINTS
# =============================================================================

@app.get("/v1/health", tags=["Health"])
def health():
    """Public health check endpoint."""
    adapter = app.state.adapter

    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
        "database": {
            **adapter.get_engine_info(),
            "healthy": adapter.health_check(),
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("obsfilter.main:app", host="0.0.0.0", port=8080)
