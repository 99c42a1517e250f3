"""
Observation export routes.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from obsfilter.adapters.base import AdapterError
from obsfilter.core.config import settings
from obsfilter.core.dependencies import get_store
from obsfilter.domain.filter.models import Filter
from obsfilter.errors import query_failed, query_validation_error
from obsfilter.observation.store import ObservationStore
from obsfilter.streaming import create_csv_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/observations/csv", tags=["Observations"])
def export_observations_csv(
    body: Filter,
    request: Request,
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum rows, header included"),
    store: ObservationStore = Depends(get_store),
):
    """Stream the observations selected by a filter as CSV, header row first."""
    request_id = getattr(request.state, "request_id", None)

    if not body.instance_id:
        raise query_validation_error(
            "instance_id must not be empty",
            field="instance_id",
            request_id=request_id
        )

    try:
        reader = store.get_csv_rows(body, limit)
    except AdapterError as e:
        raise query_failed(
            body.instance_id,
            filter_id=body.filter_id,
            reason=str(e),
            request_id=request_id
        )

    filename = f"{body.filter_id or body.instance_id}.csv"
    return create_csv_response(reader, settings.stream_chunk_size, filename=filename)
