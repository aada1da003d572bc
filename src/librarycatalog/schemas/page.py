"""
Pagination primitives shared by the listing, search and genre queries.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, TypeVar

T = TypeVar("T")


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class Page(Generic[T]):
    """
    One page of a sorted result set. Page numbers start at 0.
    """
    items: List[T] = field(default_factory=list)
    number: int = 0
    size: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    @property
    def is_past_end(self) -> bool:
        """True when the requested page lies beyond the last page of a non-empty result."""
        return self.total > 0 and self.number >= self.total_pages

    @property
    def last_number(self) -> int:
        return max(self.total_pages - 1, 0)

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
