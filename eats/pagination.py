"""
Offset/limit pagination window for the listing endpoints.

Query parameters are parsed leniently: a missing or non-integer `count` or
`start` counts as 0 rather than failing the request. Only an optional sign
followed by ASCII digits is an integer, and values outside the signed 64-bit
range also count as 0. The window is then clamped so that `count` always
lies in [1, MAX_PAGE_SIZE] (anything outside becomes MAX_PAGE_SIZE) and
`start` is never negative.
"""

import re
from dataclasses import dataclass
from typing import Optional

from fastapi import Query

MAX_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageWindow:
    start: int
    count: int


# Optional sign and ASCII digits only: no surrounding whitespace, no "1_000"
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


def _lenient_int(value: Optional[str]) -> int:
    if value is None or not _INT_PATTERN.fullmatch(value):
        return 0
    parsed = int(value)
    if parsed < _INT64_MIN or parsed > _INT64_MAX:
        return 0
    return parsed


def clamp_window(start: int, count: int) -> PageWindow:
    if count < 1 or count > MAX_PAGE_SIZE:
        count = MAX_PAGE_SIZE
    if start < 0:
        start = 0
    return PageWindow(start=start, count=count)


def page_window(
    count: Optional[str] = Query(
        default=None,
        description=f"Items per page, 1-{MAX_PAGE_SIZE}; anything else means {MAX_PAGE_SIZE}",
    ),
    start: Optional[str] = Query(
        default=None,
        description="Number of records to skip; negative values mean 0",
    ),
) -> PageWindow:
    """FastAPI dependency: `?count=&start=` → clamped PageWindow."""
    return clamp_window(_lenient_int(start), _lenient_int(count))
