"""Pagination math and the page-number window shown under a table."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal


@dataclass
class PaginationInfo:
    """Computed pagination state."""

    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages_for(total_items: int, page_size: int) -> int:
    return max(1, math.ceil(total_items / page_size))


def paginate(total_items: int, page: int = 1, page_size: int = 10) -> PaginationInfo:
    """Compute pagination state, clamping *page* to ``[1, total_pages]``."""
    total_items = max(0, total_items)
    page_size = max(1, page_size)
    total_pages = total_pages_for(total_items, page_size)
    page = max(1, min(page, total_pages))
    return PaginationInfo(
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )


def slice_page(records: Sequence[Any], info: PaginationInfo) -> list[Any]:
    """Return the records visible on ``info.page``."""
    return list(records[info.offset : info.offset + info.page_size])


# ---------------------------------------------------------------------------
# Page window
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PageButton:
    """One entry of the page selector: a page number or an ellipsis gap."""

    kind: Literal["page", "ellipsis"]
    number: int | None = None
    current: bool = False


ELLIPSIS = PageButton(kind="ellipsis")


def page_window(current_page: int, total_pages: int) -> list[PageButton]:
    """Compute the page buttons to render around ``current_page``.

    The first and last pages are always shown, with up to three interior
    pages around the current one.  The interior window shifts near either
    edge so it stays in range, and ellipses mark the skipped ranges.

    Args:
        current_page: The page being displayed (already clamped).
        total_pages: Total number of pages (at least 1).

    Returns:
        Ordered buttons with no duplicate page numbers.
    """
    total_pages = max(1, total_pages)
    current_page = max(1, min(current_page, total_pages))

    def _button(number: int) -> PageButton:
        return PageButton(kind="page", number=number, current=number == current_page)

    buttons = [_button(1)]

    if current_page > 3 and total_pages > 4:
        buttons.append(ELLIPSIS)

    start = max(2, current_page - 1)
    end = min(total_pages - 1, current_page + 1)
    if current_page <= 3:
        end = min(4, total_pages - 1)
    elif current_page >= total_pages - 2:
        start = max(2, total_pages - 3)
    for number in range(start, end + 1):
        if 1 < number < total_pages:
            buttons.append(_button(number))

    if current_page < total_pages - 2 and total_pages > 4:
        buttons.append(ELLIPSIS)

    if total_pages > 1:
        buttons.append(_button(total_pages))
    return buttons


@dataclass(frozen=True)
class PageControls:
    """Everything the pagination footer needs to render."""

    info: PaginationInfo
    buttons: list[PageButton]
    page_size_options: list[int]
    visible_count: int

    @property
    def prev_disabled(self) -> bool:
        return self.info.page == 1

    @property
    def next_disabled(self) -> bool:
        return self.info.page == self.info.total_pages

    @property
    def first_item(self) -> int:
        return self.info.offset + 1 if self.visible_count else 0

    @property
    def last_item(self) -> int:
        return self.info.offset + self.visible_count


def page_controls(
    info: PaginationInfo, page_size_options: Sequence[int], visible_count: int
) -> PageControls:
    options = list(page_size_options)
    if info.page_size not in options:
        options = sorted({*options, info.page_size})
    return PageControls(
        info=info,
        buttons=page_window(info.page, info.total_pages),
        page_size_options=options,
        visible_count=visible_count,
    )
