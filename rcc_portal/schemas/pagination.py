from typing import Optional

from pydantic import BaseModel

from rcc_portal.core.pagination import compute_window, total_pages_for


class PageEntryOut(BaseModel):
    kind: str
    page: Optional[int] = None
    is_current: bool = False

    class Config:
        from_attributes = True


class PageNavOut(BaseModel):
    page: int
    enabled: bool

    class Config:
        from_attributes = True


class PageWindowOut(BaseModel):
    current_page: int
    total_pages: int
    entries: list[PageEntryOut]
    previous: PageNavOut
    next: PageNavOut

    class Config:
        from_attributes = True


def window_out(page: int, total_items: int, page_size: int) -> PageWindowOut:
    window = compute_window(page, total_pages_for(total_items, page_size))
    return PageWindowOut.model_validate(window, from_attributes=True)
