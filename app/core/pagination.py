# app/core/pagination.py
from typing import Any, List, NamedTuple, Tuple


class Page(NamedTuple):
    items: List[Any]
    total: int
    page: int
    page_size: int


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def clamp_paging(page: int, page_size: int, max_page_size: int = 100) -> Tuple[int, int]:
    """page >= 1, page_size within [1, max_page_size]."""
    return max(1, page), clamp(page_size, 1, max_page_size)


def offset_for(page: int, page_size: int) -> int:
    return (page - 1) * page_size
