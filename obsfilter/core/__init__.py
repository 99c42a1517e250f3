"""
Core Module

Configuration and dependency injection.
"""

from obsfilter.core.config import Settings, settings

__all__ = ["Settings", "settings"]
