"""
Filter Domain

Filter job models.
"""

from obsfilter.domain.filter.models import DimensionFilter, Filter

__all__ = ["DimensionFilter", "Filter"]
