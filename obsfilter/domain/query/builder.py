"""
Cypher Builder for observation exports

Builds the single query shape used to export a filtered instance as CSV:

    <header row query> UNION ALL <observation rows query> [LIMIT n]

Usage:
    builder = ObservationQueryBuilder()
    query = builder.build(
        Filter(instance_id="888", dimensions=[{"name": "age", "options": ["29", "30"]}]),
        limit=20
    )

Dimension names and option values are inlined verbatim. Callers must only
pass trusted identifiers and values.
"""

from typing import Optional

from obsfilter.domain.filter.models import DimensionFilter, Filter


class ObservationQueryBuilder:
    """
    Builds header + observation Cypher queries for a Filter.

    Deterministic and side-effect free: identical inputs always produce
    identical query text.
    """

    HEADER_QUERY = "MATCH (i:`_{instance}_Instance`) RETURN i.header as row"
    ALL_OBSERVATIONS_QUERY = "MATCH(o: `_{instance}_observation`) return o.value as row"
    UNION = " UNION ALL "

    # Observations are linked to dimension option nodes by this relationship
    RELATIONSHIP = "isValueOf"

    def build(self, filter_job: Filter, limit: Optional[int] = None) -> str:
        """
        Build the union query for a filter.

        Args:
            filter_job: Instance and dimension constraints
            limit: Maximum number of rows (header included), None for no limit

        Returns:
            Cypher query text
        """
        query = (
            self.HEADER_QUERY.format(instance=filter_job.instance_id)
            + self.UNION
            + self.build_observation_query(filter_job)
        )

        if limit is not None:
            query += f" LIMIT {int(limit)}"

        return query

    def build_observation_query(self, filter_job: Filter) -> str:
        """Build the observation part of the query."""
        if filter_job.is_empty():
            return self.ALL_OBSERVATIONS_QUERY.format(instance=filter_job.instance_id)

        instance = filter_job.instance_id
        dimensions = filter_job.active_dimensions()

        patterns = [f"({d.name}:`_{instance}_{d.name}`)" for d in dimensions]
        constraints = [
            f"{d.name}.value IN [{self._option_list(d)}]" for d in dimensions
        ]
        carried = [d.name for d in dimensions]
        relationships = [
            f"(o:`_{instance}_observation`)-[:{self.RELATIONSHIP}]->({d.name})"
            for d in dimensions
        ]

        return (
            "MATCH " + ", ".join(patterns)
            + " WHERE " + " AND ".join(constraints)
            + " WITH " + ", ".join(carried)
            + " MATCH " + ", ".join(relationships)
            + " RETURN o.value AS row"
        )

    def _option_list(self, dimension: DimensionFilter) -> str:
        return ", ".join(f"'{option}'" for option in dimension.options)


_default_builder = ObservationQueryBuilder()


def build_query(filter_job: Filter, limit: Optional[int] = None) -> str:
    """Build the export query with the default builder."""
    return _default_builder.build(filter_job, limit)
