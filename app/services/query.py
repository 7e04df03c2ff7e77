"""
Paged listing with search, sort and pagination.

Raw query parameters are normalized into a PageRequest first, so nothing
the caller sends reaches the database unchecked:
- sort_by must be in the per-entity allow-list, otherwise the default is used
- order is exactly "asc" or "desc" (anything else becomes "asc")
- page and limit are clamped to positive integers (limit capped at MAX_PAGE_SIZE)
- the search term is matched case-insensitively as a literal substring
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.engagement import Engagement
from app.models.person import Person


@dataclass(frozen=True)
class EntityQuerySpec:
    """Which columns of a model may be sorted on and searched."""
    model: Any
    sortable: Tuple[str, ...]
    default_sort: str
    searchable: Tuple[str, ...]


PERSON_QUERY = EntityQuerySpec(
    model=Person,
    sortable=("institution_id", "name", "program", "cohort_year", "graduation_year", "email", "created_at"),
    default_sort="name",
    searchable=("institution_id", "name", "program", "email", "phone", "address"),
)

ENGAGEMENT_QUERY = EntityQuerySpec(
    model=Engagement,
    sortable=("employer", "position", "industry", "location", "start_date", "end_date", "status", "created_at"),
    default_sort="created_at",
    searchable=("employer", "position", "industry", "location"),
)


# Largest row offset a 64-bit SQL integer can hold
MAX_OFFSET = 2 ** 63 - 1


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


@dataclass(frozen=True)
class PageRequest:
    """Validated listing parameters. Build with PageRequest.normalize()."""
    search: str
    sort_by: str
    order: str
    page: int
    limit: int

    @classmethod
    def normalize(
        cls,
        spec: EntityQuerySpec,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
        page: Any = 1,
        limit: Any = None,
    ) -> "PageRequest":
        sort_field = sort_by if sort_by in spec.sortable else spec.default_sort
        direction = "desc" if isinstance(order, str) and order.strip().lower() == "desc" else "asc"

        page_number = max(1, _to_int(page, 1))
        page_size = _to_int(limit, settings.DEFAULT_PAGE_SIZE)
        page_size = min(max(1, page_size), settings.MAX_PAGE_SIZE)
        # Far-out pages just come back empty
        page_number = min(page_number, MAX_OFFSET // page_size + 1)

        return cls(
            search=(search or "").strip(),
            sort_by=sort_field,
            order=direction,
            page=page_number,
            limit=page_size,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        """Pagination metadata for a result set of `total` matches."""
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "pages": math.ceil(total / self.limit) if total else 0,
            "sort_by": self.sort_by,
            "order": self.order,
            "search": self.search,
        }


def _escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_filter(spec: EntityQuerySpec, term: str):
    """OR of case-insensitive substring matches across the searchable columns."""
    pattern = f"%{_escape_like(term)}%"
    return or_(*[getattr(spec.model, field).ilike(pattern, escape="\\") for field in spec.searchable])


def run_query(db: Session, spec: EntityQuerySpec, request: PageRequest, query=None) -> Tuple[List[Any], int]:
    """
    Execute a paged listing.

    Args:
        db: Database session
        spec: Entity spec (PERSON_QUERY or ENGAGEMENT_QUERY)
        request: Normalized page request
        query: Optional pre-filtered base query (e.g. soft-delete scope)

    Returns:
        (items on the requested page, total matches before pagination)
    """
    model = spec.model
    if query is None:
        query = db.query(model)

    if request.search:
        query = query.filter(search_filter(spec, request.search))

    total = query.count()

    column = getattr(model, request.sort_by)
    ordering = column.desc() if request.order == "desc" else column.asc()
    # Tie-break on id so pages are stable
    items = (
        query.order_by(ordering, model.id.asc())
        .offset(request.offset)
        .limit(request.limit)
        .all()
    )
    return items, total
