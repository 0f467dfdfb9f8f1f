"""Paginated, single-field-sorted listing over a ``UserStore``.

``count`` and ``fetch_ordered`` run as two separate reads with no isolation
between them. A write that lands between the two can leave ``totalRecords``
and ``totalPages`` slightly out of step with the returned window; listing
accepts that rather than locking the store.
"""

import math
import re
from typing import Any

from pydantic import BaseModel, Field

from registry.models.user import UserRecord
from registry.stores.base import SortDirection, UserStore

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT_FIELD = "name"

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def positive_int(value: Any, default: int) -> int:
    """Read ``value`` as a positive integer, else return ``default``.

    Text is read up to the first non-digit (``"4abc"`` -> 4); floats are
    truncated. Missing, non-numeric and non-positive values give ``default``.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, float):
        value = int(value) if math.isfinite(value) else 0
    elif isinstance(value, str):
        m = _LEADING_INT.match(value)
        value = int(m.group(1)) if m else 0
    elif not isinstance(value, int):
        return default
    return value if value > 0 else default


def total_pages(total_records: int, limit: int) -> int:
    return -(-total_records // limit)


class PageRequest(BaseModel):
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: SortDirection = SortDirection.ASC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_query(
        cls,
        page: Any = None,
        limit: Any = None,
        sort: str | None = None,
        sort_direction: str | None = None,
        default_limit: int = DEFAULT_LIMIT,
        default_sort_field: str = DEFAULT_SORT_FIELD,
    ) -> "PageRequest":
        """Build a request from raw query values, defaulting anything malformed."""
        return cls(
            page=positive_int(page, DEFAULT_PAGE),
            limit=positive_int(limit, default_limit),
            sort_field=sort or default_sort_field,
            sort_direction=SortDirection.DESC if sort_direction == "desc" else SortDirection.ASC,
        )


class PageResult(BaseModel):
    records: list[UserRecord]
    current_page: int = Field(serialization_alias="currentPage")
    total_pages: int = Field(serialization_alias="totalPages")
    total_records: int = Field(serialization_alias="totalRecords")

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Paginator:
    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def paginate(self, request: PageRequest) -> PageResult:
        """Select one page of records and its metadata. Store errors propagate unchanged."""
        total = await self.store.count()
        # nothing to fetch past the end; never ask for more than remains
        remaining = total - request.offset
        records = []
        if remaining > 0:
            records = await self.store.fetch_ordered(
                request.sort_field,
                request.sort_direction,
                request.offset,
                min(request.limit, remaining),
            )
        return PageResult(
            records=records,
            current_page=request.page,
            total_pages=total_pages(total, request.limit),
            total_records=total,
        )
