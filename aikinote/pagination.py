"""Incremental "load more" window over the filtered page list."""
from __future__ import annotations

from typing import Hashable, List, Optional, Sequence, TypeVar

from aikinote.config import PAGE_SIZE

T = TypeVar("T")

_UNSET = object()


class PaginationWindow:
    """Exposes the first ``displayed_items_count`` items of a result list.

    The window grows one page at a time and snaps back to a single page when
    the filter criteria passed to :meth:`sync` change.
    """

    def __init__(self, page_size: int = PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size
        self.displayed_items_count = page_size
        self._criteria: object = _UNSET

    def sync(self, criteria: Optional[Hashable]) -> bool:
        """Reset to the first page if ``criteria`` differ from the last call."""
        if self._criteria is not _UNSET and criteria == self._criteria:
            return False
        self._criteria = criteria
        self.reset()
        return True

    def reset(self) -> None:
        self.displayed_items_count = self.page_size

    def load_more(self) -> None:
        self.displayed_items_count += self.page_size

    def has_more(self, total: int) -> bool:
        return total > self.displayed_items_count

    def visible(self, items: Sequence[T]) -> List[T]:
        return list(items[: self.displayed_items_count])


__all__ = ["PaginationWindow"]
