"""
Pagination for complaint listings.

Both the student and admin tables go through the same three steps: slice the
full result set for the requested page, build the prev / numbered / next
controls, and map each visible record to a row view-model. Nothing here keeps
state between calls; the current page travels in a ListingView.
"""
import math
from dataclasses import dataclass, field, replace
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")

EMPTY_MESSAGE = "No complaints found"

PREVIOUS_LABEL = "«"
NEXT_LABEL = "»"


@dataclass(frozen=True)
class ListingView:
    page: int = 1
    page_size: int = 5
    # Bumped on every navigation so clients can drop out-of-order responses
    generation: int = 0

    def with_page(self, page: int) -> "ListingView":
        return replace(self, page=page, generation=self.generation + 1)


@dataclass(frozen=True)
class PageControl:
    kind: str  # "previous", "page" or "next"
    label: str
    page: int
    active: bool = False
    disabled: bool = False
    href: Optional[str] = None


@dataclass
class ListingPage(Generic[R]):
    view: ListingView
    total_pages: int
    rows: List[R] = field(default_factory=list)
    controls: List[PageControl] = field(default_factory=list)
    empty_message: Optional[str] = None


def count_pages(total_items: int, page_size: int) -> int:
    return math.ceil(total_items / page_size)


def paginate(items: Sequence[T], page_size: int, page: int) -> Tuple[List[T], int]:
    """
    Return the records visible on `page` and the total number of pages.

    Pages past the end give an empty slice; the page number is not clamped.
    """
    total_pages = count_pages(len(items), page_size)
    start = (page - 1) * page_size
    end = min(page * page_size, len(items))
    return list(items[start:end]), total_pages


def build_pagination(
    total_items: int,
    view: ListingView,
    link_for: Optional[Callable[[int], str]] = None,
) -> List[PageControl]:
    """Previous, one control per page, next. Empty when everything fits on one page."""
    total_pages = count_pages(total_items, view.page_size)
    if total_pages <= 1:
        return []

    def href(page: int) -> Optional[str]:
        return link_for(page) if link_for else None

    controls = [
        PageControl(
            kind="previous",
            label=PREVIOUS_LABEL,
            page=view.page - 1,
            disabled=view.page <= 1,
            href=href(view.page - 1),
        )
    ]
    for number in range(1, total_pages + 1):
        controls.append(
            PageControl(
                kind="page",
                label=str(number),
                page=number,
                active=number == view.page,
                href=href(number),
            )
        )
    controls.append(
        PageControl(
            kind="next",
            label=NEXT_LABEL,
            page=view.page + 1,
            disabled=view.page >= total_pages,
            href=href(view.page + 1),
        )
    )
    return controls


def select_page(
    view: ListingView,
    total_pages: int,
    index: int,
    callback: Callable[[int], R],
) -> Optional[R]:
    """
    Handle a click on the control at `index` (0 is previous, total_pages + 1 is next).

    The callback gets the requested page number and does the re-fetch. Clicks on
    a disabled previous/next control are ignored and return None.
    """
    if index == 0:
        if view.page > 1:
            return callback(view.page - 1)
        return None
    if index == total_pages + 1:
        if view.page < total_pages:
            return callback(view.page + 1)
        return None
    if 0 < index <= total_pages:
        return callback(index)
    return None


def render_listing(
    items: Sequence[T],
    view: ListingView,
    to_row: Callable[[T], R],
    link_for: Optional[Callable[[int], str]] = None,
    empty_message: str = EMPTY_MESSAGE,
) -> ListingPage[R]:
    if not items:
        return ListingPage(view=view, total_pages=0, empty_message=empty_message)

    visible, total_pages = paginate(items, view.page_size, view.page)
    return ListingPage(
        view=view,
        total_pages=total_pages,
        rows=[to_row(item) for item in visible],
        controls=build_pagination(len(items), view, link_for),
    )
