"""
obsfilter - Structured Error Handling

ERROR RESPONSE FORMAT:
----------------------
{
    "error": {
        "code": "ERR_4002",
        "message": "Observation query failed for instance '888'",
        "details": {"filter_id": "f1", "instance_id": "888"},
        "suggestion": "Check that the instance has been imported",
        "request_id": "abc-123",
        "timestamp": "..."
    }
}
"""

import logging
import uuid
from typing import Optional, Dict, Any
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR CODES
# =============================================================================

class ErrorCode(str, Enum):
    """Unique error codes for every error type."""

    # Query Validation (3xxx)
    ERR_QUERY_INVALID = "ERR_3001"

    # Query Execution (4xxx)
    ERR_QUERY_FAILED = "ERR_4002"
    ERR_CONNECTION_FAILED = "ERR_4003"

    # Internal (9xxx)
    ERR_INTERNAL = "ERR_9001"


# =============================================================================
# ERROR RESPONSE
# =============================================================================

@dataclass
class ObsFilterError(Exception):
    """
    Structured error with all context needed for debugging.

    Attributes:
        code: Unique error code for searching logs
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional context (dict)
        suggestion: How to fix the issue
        request_id: Request tracing ID
    """
    code: ErrorCode
    message: str
    status_code: int = 400
    details: Dict[str, Any] = field(default_factory=dict)
    suggestion: Optional[str] = None
    request_id: Optional[str] = None

    def __post_init__(self):
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response format."""
        error_dict = {
            "code": self.code.value,
            "message": self.message,
        }

        if self.details:
            error_dict["details"] = self.details

        if self.suggestion:
            error_dict["suggestion"] = self.suggestion

        if self.request_id:
            error_dict["request_id"] = self.request_id

        error_dict["timestamp"] = datetime.now(timezone.utc).isoformat()

        return {"error": error_dict}

    def to_response(self) -> JSONResponse:
        """Convert to FastAPI JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_dict()
        )

    def log(self, level: str = "error"):
        """Log the error with context."""
        log_msg = f"[{self.code.value}] {self.message}"
        if self.details:
            log_msg += f" | details={self.details}"
        if self.request_id:
            log_msg += f" | request_id={self.request_id}"

        getattr(logger, level)(log_msg)


# =============================================================================
# ERROR FACTORY FUNCTIONS
# =============================================================================

def query_validation_error(
    message: str,
    field: Optional[str] = None,
    actual: Optional[Any] = None,
    request_id: Optional[str] = None
) -> ObsFilterError:
    """Create query validation error."""
    details = {}
    if field:
        details["field"] = field
    if actual is not None:
        details["actual"] = actual

    return ObsFilterError(
        code=ErrorCode.ERR_QUERY_INVALID,
        message=message,
        status_code=400,
        details=details,
        suggestion="Check the filter body and query parameters",
        request_id=request_id
    )


def query_failed(
    instance_id: str,
    filter_id: Optional[str] = None,
    reason: Optional[str] = None,
    request_id: Optional[str] = None
) -> ObsFilterError:
    """Create error for an observation query the database could not run."""
    details = {"instance_id": instance_id}
    if filter_id:
        details["filter_id"] = filter_id
    if reason:
        details["reason"] = reason

    return ObsFilterError(
        code=ErrorCode.ERR_QUERY_FAILED,
        message=f"Observation query failed for instance '{instance_id}'",
        status_code=502,
        details=details,
        suggestion="Check that the instance has been imported and that dimension names are valid",
        request_id=request_id
    )


def connection_failed(
    engine: str,
    reason: Optional[str] = None,
    request_id: Optional[str] = None
) -> ObsFilterError:
    """Create error for an unreachable database."""
    details = {"engine": engine}
    if reason:
        details["reason"] = reason

    return ObsFilterError(
        code=ErrorCode.ERR_CONNECTION_FAILED,
        message=f"Could not connect to {engine}",
        status_code=503,
        details=details,
        suggestion="Check NEO4J_URI and credentials, and that the database is running",
        request_id=request_id
    )


def internal_error(
    message: str = "An unexpected error occurred",
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None
) -> ObsFilterError:
    """Create internal error - use sparingly, prefer specific errors."""
    return ObsFilterError(
        code=ErrorCode.ERR_INTERNAL,
        message=message,
        status_code=500,
        details=details or {},
        request_id=request_id
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())[:8]


async def obsfilter_error_handler(request: Request, exc: ObsFilterError) -> JSONResponse:
    """Handle ObsFilterError and return structured response."""
    if not exc.request_id:
        exc.request_id = _request_id(request)

    exc.log()

    return exc.to_response()


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException and convert to structured format."""
    request_id = _request_id(request)

    error_response = {
        "error": {
            "code": f"ERR_HTTP_{exc.status_code}",
            "message": str(exc.detail),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": request_id
        }
    }

    logger.error(f"[ERR_HTTP_{exc.status_code}] {exc.detail} | request_id={request_id}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = _request_id(request)

    # Log full traceback for debugging
    logger.exception(f"Unhandled exception | request_id={request_id}")

    error = internal_error(
        details={"exception_type": type(exc).__name__},
        request_id=request_id
    )

    return error.to_response()


def install_error_handlers(app):
    """Install error handlers on FastAPI app."""
    app.add_exception_handler(ObsFilterError, obsfilter_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Structured error handlers installed")
