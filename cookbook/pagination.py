"""Page value returned by list operations, and the two paging policies."""

from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

from cookbook.exceptions import ValidationError

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus the total matching the same filter."""
    items: List[T] = field(default_factory=list)
    page: int = 1
    size: int = 10
    total: int = 0

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total


def validate_paging(page, size):
    """Reject policy: page must be >= 1 and size > 0."""
    if not isinstance(page, int) or isinstance(page, bool) or page < 1:
        raise ValidationError("Page must be an integer >= 1", code="page")
    if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
        raise ValidationError("Size must be a positive integer", code="size")
    return page, size


def clamp_paging(page, size, *, max_size):
    """Clamp policy: out-of-range values are pulled back into 1..max_size."""
    page = max(1, int(page or 1))
    size = min(max(1, int(size or 1)), max_size)
    return page, size


def paginate(qs, page, size, total=None):
    """Slice an ordered queryset into a Page; `total` defaults to ``qs.count()``."""
    if total is None:
        total = qs.count()
    start = (page - 1) * size
    items = list(qs[start:start + size]) if total else []
    return Page(items=items, page=page, size=size, total=total)
