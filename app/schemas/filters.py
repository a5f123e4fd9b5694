"""
Segment filter schema.

Filters are stored as JSON on the lists table and consumed by the external
company search. Unknown keys are preserved so the payload round-trips
untouched.
"""

from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from app.utils.company_size import merge_selections, split_range_to_selections


class SegmentFilters(BaseModel):
    """Structured segment/list criteria."""

    country: Optional[str] = None
    region: Optional[str] = None
    location: Optional[str] = None
    categories: Optional[List[str]] = None
    technographics: Optional[List[str]] = None
    personas: Optional[List[int]] = None

    # Persisted as a single-element list holding the merged range string,
    # older rows hold the bare string
    employees: Optional[Union[str, List[str]]] = None

    model_config = ConfigDict(extra="allow")

    def employee_range(self) -> Optional[str]:
        """The persisted employee range string, if any."""
        value = self.employees
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, str) and value.strip():
            return value
        return None

    def employee_selections(self) -> List[str]:
        """Expand the employee range back into size bucket labels."""
        value = self.employee_range()
        return split_range_to_selections(value) if value else []

    def with_employee_selections(self, labels: Sequence[str]) -> "SegmentFilters":
        """Copy of these filters with employees set from bucket labels."""
        merged = merge_selections(list(labels))
        return self.model_copy(update={"employees": [merged] if merged else None})

    def is_empty(self) -> bool:
        return not self.to_payload()

    def to_payload(self) -> dict:
        """JSON-ready dict without unset/None fields."""
        return self.model_dump(exclude_none=True)
