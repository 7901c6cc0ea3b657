"""
Page-link window for paginated listings.

The window shows at most MAX_PAGES_TO_SHOW contiguous page numbers around
the current page, plus the first and last pages (collapsed with an ellipsis
when there is a gap) and previous/next affordances.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

MAX_PAGES_TO_SHOW = 5
ELLIPSIS = "ellipsis"


@dataclass(frozen=True)
class PageEntry:
    kind: str  # "page" or "ellipsis"
    page: Optional[int] = None
    is_current: bool = False


@dataclass(frozen=True)
class PageNav:
    page: int
    enabled: bool


@dataclass(frozen=True)
class PageWindow:
    current_page: int
    total_pages: int
    entries: tuple[PageEntry, ...]
    previous: PageNav
    next: PageNav

    def numbers(self) -> list[int]:
        """Page numbers in display order, ellipses dropped."""
        return [e.page for e in self.entries if e.kind == "page"]

    def labels(self) -> list:
        """Entries as plain values: ints for pages, "…" for ellipses."""
        return ["…" if e.kind == ELLIPSIS else e.page for e in self.entries]


def total_pages_for(total_items: int, page_size: int) -> int:
    if total_items <= 0 or page_size <= 0:
        return 0
    return math.ceil(total_items / page_size)


def compute_window(current_page: int, total_pages: int) -> PageWindow:
    total = max(0, int(total_pages))
    current = min(max(1, int(current_page)), max(total, 1))

    if total == 0:
        return PageWindow(
            current_page=current,
            total_pages=0,
            entries=(),
            previous=PageNav(page=1, enabled=False),
            next=PageNav(page=1, enabled=False),
        )

    start = max(1, current - MAX_PAGES_TO_SHOW // 2)
    end = min(total, start + MAX_PAGES_TO_SHOW - 1)
    if end - start + 1 < MAX_PAGES_TO_SHOW:
        start = max(1, end - MAX_PAGES_TO_SHOW + 1)

    entries: list[PageEntry] = []
    if start > 1:
        entries.append(PageEntry(kind="page", page=1, is_current=current == 1))
        if start > 2:
            entries.append(PageEntry(kind=ELLIPSIS))

    for number in range(start, end + 1):
        entries.append(PageEntry(kind="page", page=number, is_current=number == current))

    if end < total:
        if end < total - 1:
            entries.append(PageEntry(kind=ELLIPSIS))
        entries.append(PageEntry(kind="page", page=total, is_current=current == total))

    return PageWindow(
        current_page=current,
        total_pages=total,
        entries=tuple(entries),
        previous=PageNav(page=max(1, current - 1), enabled=current != 1),
        next=PageNav(page=min(total, current + 1), enabled=current != total),
    )
