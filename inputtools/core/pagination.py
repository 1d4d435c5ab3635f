import math
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page:
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    start_index: int
    end_index: int

    def slice(self, items: Sequence[T]) -> List[T]:
        return list(items[self.start_index : self.end_index])


def paginate(total_items: int, page_size: int, requested_page: int) -> Page:
    """
    Derive page bounds for `total_items`, clamping `requested_page` onto the last page.
    There is always at least one (possibly empty) page.
    """
    safe_page_size = max(1, page_size)
    total_pages = max(1, math.ceil(total_items / safe_page_size))
    current = min(requested_page, total_pages - 1)
    start = current * safe_page_size
    return Page(
        total_pages=total_pages,
        current_page=current,
        has_next_page=current < total_pages - 1,
        has_previous_page=current > 0,
        start_index=start,
        end_index=start + safe_page_size,
    )
