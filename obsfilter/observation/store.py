"""
Observation Store

Binds the export query for a filter to the graph database and hands back a
byte reader over the resulting CSV rows.
"""

import logging
from typing import Optional

from obsfilter.adapters.base import BaseAdapter
from obsfilter.domain.filter.models import Filter
from obsfilter.domain.query.builder import ObservationQueryBuilder
from obsfilter.observation.reader import ObservationReader
from obsfilter.observation.row_reader import GraphRowReader

logger = logging.getLogger(__name__)


class ObservationStore:
    """
    Storage for observation data.

    Each get_csv_rows() call borrows one database connection, held by the
    returned reader until it is closed.
    """

    def __init__(self, adapter: BaseAdapter, builder: Optional[ObservationQueryBuilder] = None):
        self.adapter = adapter
        self.builder = builder or ObservationQueryBuilder()

    def get_csv_rows(self, filter_job: Filter, limit: Optional[int] = None) -> ObservationReader:
        """
        Return a reader over the CSV rows selected by a filter.

        The header row always comes first. Pass limit=None for every row.

        Raises:
            AdapterError: If the query cannot be executed
        """
        query = self.builder.build(filter_job, limit)

        if filter_job.is_empty():
            logger.info(
                f"No dimension filters supplied, generating entire dataset query | "
                f"filter_id={filter_job.filter_id} instance_id={filter_job.instance_id}"
            )
        logger.info(
            f"neo4j query | filter_id={filter_job.filter_id} "
            f"instance_id={filter_job.instance_id} query={query}"
        )

        cursor = self.adapter.execute(query)

        try:
            return ObservationReader(GraphRowReader(cursor))
        except Exception:
            cursor.close()
            raise
