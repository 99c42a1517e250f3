"""
HTTP API routes.
"""

from obsfilter.api.routes import router

__all__ = ["router"]
