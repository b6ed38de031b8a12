"""
Pagination for collections.

A :class:`Pagination` describes one page window over a total number of
members: page size, current page, offset and the derived page numbers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .config import get_config
from .core.exceptions import PaginationError
from .utils.validation import validate_int


@dataclass
class Pagination:
    """
    Page window descriptor.

    Attributes:
        total: Total number of members
        limit: Members per page
        page: Current page (1-based)

    Example:
        >>> pagination = Pagination(total=45, limit=20, page=3)
        >>> pagination.offset, pagination.pages, pagination.has_next_page
        (40, 3, False)
    """

    total: int = 0
    limit: Optional[int] = None
    page: int = 1
    validate: Optional[bool] = None

    def __post_init__(self):
        settings = get_config()

        if self.limit is None:
            self.limit = settings.pagination_limit
        if self.validate is None:
            self.validate = settings.pagination_validate

        self.total = validate_int("total", self.total, 0, PaginationError)
        self.limit = validate_int("limit", self.limit, 1, PaginationError)
        self.page = validate_int("page", self.page, 1, PaginationError)

        last = max(self.pages, 1)
        if self.page > last:
            if self.validate:
                raise PaginationError(
                    f"Pagination page {self.page} does not exist, expected 1-{last}"
                )
            self.page = last

    @classmethod
    def for_collection(cls, collection, *args: Any) -> Pagination:
        """
        Create a pagination for a collection.

        Accepted arguments: none (defaults), ``(limit)``, ``(params)``,
        ``(limit, page)`` and ``(limit, params)`` where ``params`` is a
        mapping with ``limit``, ``page`` and ``validate`` keys.
        """
        params: Dict[str, Any] = {}

        if len(args) > 2:
            raise PaginationError(f"Invalid pagination arguments: {args!r}")

        if len(args) >= 1:
            first = args[0]
            if isinstance(first, Mapping):
                params.update(first)
            else:
                params["limit"] = first

        if len(args) == 2:
            second = args[1]
            if isinstance(second, Mapping):
                params.update(second)
            else:
                params["page"] = second

        unknown = set(params) - {"limit", "page", "validate"}
        if unknown:
            raise PaginationError(f"Unknown pagination options: {sorted(unknown)}")

        return cls(total=len(collection), **params)

    # =========================================================================
    # WINDOW
    # =========================================================================

    @property
    def offset(self) -> int:
        """Index of the first member on the current page."""
        return (self.page - 1) * self.limit

    @property
    def pages(self) -> int:
        """Number of pages (0 for an empty collection)."""
        if self.total == 0:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def start(self) -> int:
        """1-based index of the first member on the page (0 when empty)."""
        if self.total == 0:
            return 0
        return self.offset + 1

    @property
    def end(self) -> int:
        """1-based index of the last member on the page."""
        return min(self.offset + self.limit, self.total)

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    @property
    def first_page(self) -> int:
        return 1

    @property
    def last_page(self) -> int:
        return max(self.pages, 1)

    @property
    def has_pages(self) -> bool:
        return self.total > self.limit

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.last_page

    @property
    def prev_page(self) -> Optional[int]:
        return self.page - 1 if self.has_prev_page else None

    @property
    def next_page(self) -> Optional[int]:
        return self.page + 1 if self.has_next_page else None

    @property
    def is_first_page(self) -> bool:
        return self.page == 1

    @property
    def is_last_page(self) -> bool:
        return self.page == self.last_page

    def has_page(self, page: int) -> bool:
        return 1 <= page <= self.last_page

    def range(self, size: int = 5) -> List[int]:
        """
        Page numbers of a window of ``size`` pages around the current page.

        Example:
            >>> Pagination(total=200, limit=10, page=10).range(5)
            [8, 9, 10, 11, 12]
        """
        size = validate_int("size", size, 1, PaginationError)
        last = self.last_page
        if size >= last:
            return list(range(1, last + 1))

        start = self.page - size // 2
        start = max(1, min(start, last - size + 1))
        return list(range(start, start + size))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "page": self.page,
            "first_page": self.first_page,
            "last_page": self.last_page,
            "pages": self.pages,
            "offset": self.offset,
            "limit": self.limit,
            "total": self.total,
            "start": self.start,
            "end": self.end,
        }
