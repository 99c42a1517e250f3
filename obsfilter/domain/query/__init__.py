"""
Query Domain

Cypher query building for observation exports.
"""

from obsfilter.domain.query.builder import ObservationQueryBuilder, build_query

__all__ = ["ObservationQueryBuilder", "build_query"]
