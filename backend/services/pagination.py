"""Pagination metadata derived from provider-reported result counts."""
from __future__ import annotations

import math
import re
from typing import Any, Sequence, TypeVar

from domain.models import SearchMetadata, SearchType

RESULTS_PER_PAGE = 20
MAX_PAGES = 10

T = TypeVar("T")


def parse_total_results(value: Any) -> int:
    """
    Parse provider counts such as ``"1,230,000"``, ``"4 521"`` or ``4521``.

    Text before the digits (``"About 1,000"``) is not skipped and yields 0,
    as do non-finite floats.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    digits = re.sub(r"[,\s]", "", str(value))
    match = re.match(r"\d+", digits)
    if not match:
        return 0
    return int(match.group(0))


def build_search_metadata(
    total_results: Any,
    page: int,
    time_taken: float,
    search_type: SearchType,
    results_per_page: int = RESULTS_PER_PAGE,
) -> SearchMetadata:
    total = parse_total_results(total_results)
    raw_pages = math.ceil(total / results_per_page) if results_per_page else 0
    return SearchMetadata(
        total_results=str(total_results) if total_results is not None else "0",
        time_taken_displayed=time_taken,
        search_type=search_type,
        current_page=page,
        total_pages=min(raw_pages, MAX_PAGES),
        has_next_page=page < raw_pages and page < MAX_PAGES,
        has_prev_page=page > 1,
        results_per_page=results_per_page,
    )


def slice_page(items: Sequence[T], page: int, per_page: int = RESULTS_PER_PAGE) -> list[T]:
    """Local pagination for providers that return everything at once."""
    start = (page - 1) * per_page
    return list(items[start:start + per_page])
