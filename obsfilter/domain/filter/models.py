"""
Filter job models.

A filter job names the instance to export and the dimension options to
keep. Field names on the wire follow the filter API JSON.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DimensionFilter(BaseModel):
    """A dimension name and the option values allowed for it."""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    options: List[str] = Field(default_factory=list)

    def is_active(self) -> bool:
        return bool(self.name) and len(self.options) > 0


class Filter(BaseModel):
    """
    Filter job describing which observations of an instance to export.

    An empty filter (no dimension filters, or only ones with an empty name
    or no options) selects every observation of the instance.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filter_id: str = ""                   # Logging / tracing only
    instance_id: str
    dimension_filters: Optional[List[DimensionFilter]] = Field(default=None, alias="dimensions")

    def active_dimensions(self) -> List[DimensionFilter]:
        return [d for d in self.dimension_filters or [] if d.is_active()]

    def is_empty(self) -> bool:
        return not self.active_dimensions()
