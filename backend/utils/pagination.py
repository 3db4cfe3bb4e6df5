from typing import Callable
from fastapi import Request
from core.listing import ListingView


def page_link(request: Request, view: ListingView) -> Callable[[int], str]:
    """Links for pagination controls: same path and filters, new page and generation."""
    def link_for(page: int) -> str:
        next_view = view.with_page(page)
        url = request.url.include_query_params(page=next_view.page, generation=next_view.generation)
        return f"{url.path}?{url.query}"

    return link_for
