"""
hoteldesk/domain/pagination.py

Page-number strip for paginated lists

Produces the sequence of page numbers to render, collapsing long runs into
DOTS. The first and last page are always shown; the current page is shown
with `sibling_count` neighbours on each side.
"""
import math
from typing import List, Union

DOTS = "..."

PageItem = Union[int, str]


def _range(start: int, end: int) -> List[int]:
    """Inclusive integer range"""
    return list(range(start, end + 1))


def page_count(total_items: int, limit: int) -> int:
    """Number of pages needed for total_items at limit per page"""
    if limit <= 0:
        raise ValueError("limit must be positive")
    return math.ceil(max(total_items, 0) / limit)


def pagination_range(total_pages: int, current_page: int, sibling_count: int = 1) -> List[PageItem]:
    """
    Compute the page strip

    Args:
        total_pages: number of pages
        current_page: 1-based current page
        sibling_count: pages shown on each side of the current page

    Returns:
        e.g. [1, 2, 3, 4, 5, "...", 10] or [1, "...", 4, 5, 6, "...", 10]
    """
    # first + last + current + 2 DOTS + siblings
    total_page_numbers = sibling_count + 5

    if total_page_numbers >= total_pages:
        return _range(1, total_pages)

    left_sibling_index = max(current_page - sibling_count, 1)
    right_sibling_index = min(current_page + sibling_count, total_pages)

    should_show_left_dots = left_sibling_index > 2
    should_show_right_dots = right_sibling_index < total_pages - 2

    first_page_index = 1
    last_page_index = total_pages

    if not should_show_left_dots and should_show_right_dots:
        left_item_count = 3 + 2 * sibling_count
        return _range(1, left_item_count) + [DOTS, total_pages]

    if should_show_left_dots and not should_show_right_dots:
        right_item_count = 3 + 2 * sibling_count
        return [first_page_index, DOTS] + _range(total_pages - right_item_count + 1, total_pages)

    if should_show_left_dots and should_show_right_dots:
        middle_range = _range(left_sibling_index, right_sibling_index)
        return [first_page_index, DOTS] + middle_range + [DOTS, last_page_index]

    return []
