# rentals_api/pagination.py
from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class PaginationWindow:
    """Inclusive row offsets of one page."""
    start: int
    end: int

    @property
    def limit(self) -> int:
        return self.end - self.start + 1


def window_for(page_size: int, page_number: int) -> PaginationWindow:
    return PaginationWindow(
        start=page_size * (page_number - 1),
        end=page_size * page_number - 1,
    )


class Pagination(BaseModel):
    total_count: int
    total_pages: int
    page_number: int
    page_size: int
    next_page: int
    prev_page: int
    start: int
    end: int
    shown_start: int
    shown_end: int
    label: str


def derive_pagination(total_count: int, page_size: int, page_number: int) -> Pagination:
    """
    Page count, neighbour pages and the 1-indexed "showing X - Y of Z" window.
    Navigation is clamped: prev on page 1 and next on the last page stay put.
    """
    window = window_for(page_size, page_number)

    pages, remainder = divmod(total_count, page_size)
    total_pages = pages if remainder == 0 else pages + 1

    next_page = page_number + 1 if page_number < total_pages else page_number
    prev_page = page_number - 1 if page_number > 1 else page_number

    shown_start = min(total_count, window.start + 1)
    shown_end = min(total_count, window.end + 1)
    if total_count == 0:
        label = "No results"
    else:
        label = f"Showing {shown_start} - {shown_end} results of {total_count}"

    return Pagination(
        total_count=total_count,
        total_pages=total_pages,
        page_number=page_number,
        page_size=page_size,
        next_page=next_page,
        prev_page=prev_page,
        start=window.start,
        end=window.end,
        shown_start=shown_start,
        shown_end=shown_end,
        label=label,
    )
