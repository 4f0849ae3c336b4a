# server/core/pagination.py

import math
from typing import Iterator, List, Optional


LEFT_EDGE = 2
LEFT_SPREAD = 1
RIGHT_SPREAD = 1
RIGHT_EDGE = 2


def normalize_page(page) -> int:
    """
    Coerces a page parameter into a 1-indexed page number.
    Missing, non-numeric, zero and negative values all mean the first page.
    """
    if page is None:
        return 1
    try:
        page = int(page)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total > 0 else 0


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def page_window(current_page: int, n_pages: int) -> List[Optional[int]]:
    """
    Sparse list of page numbers around `current_page`, with `None` marking a gap.

        page_window(10, 20) -> [1, 2, 3, None, 9, 10, 11, None, 19, 20]
    """
    return list(_iter_window(current_page, n_pages))


def _iter_window(current_page: int, n_pages: int) -> Iterator[Optional[int]]:
    if n_pages <= 0:
        return

    # leading edge, page 1 included
    edge_end = min(1 + LEFT_EDGE, n_pages)
    yield from range(1, edge_end + 1)
    last = edge_end
    if last == n_pages:
        return

    # pages around the current one
    start = max(last + 1, current_page - LEFT_SPREAD)
    end = min(current_page + RIGHT_SPREAD + 1, n_pages + 1)
    if start < end:
        if start > last + 1:
            yield None
        yield from range(start, end)
        last = end - 1
    if last == n_pages:
        return

    # trailing edge
    start = max(last + 1, n_pages - RIGHT_EDGE + 1)
    if start > last + 1:
        yield None
    yield from range(start, n_pages + 1)
