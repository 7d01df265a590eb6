"""
Cursor-based paging over the generation history.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from collections.abc import Awaitable
from typing import Callable
from typing import Optional

from ._models import HistoryPage
from ._query import START_AFTER
from ._query import QueryParam
from ._query import start_after

FetchHistory = Callable[..., Awaitable[tuple[HistoryPage, Optional["HistoryCursor"]]]]


class HistoryCursor:
    """
    Continuation for the next history page.

    A cursor only exists while the previous page reported ``has_more``. Calling
    it repeats the original listing request with a ``start_after`` filter for
    the last item already seen, and returns the next page together with a new
    cursor, or ``None`` once the last page has been reached.

    Query modifiers passed to the call override original ones with the same
    key, so a page size chosen on the first call persists unless replaced.
    A ``start_after`` passed to the call is ignored; the cursor always
    continues after ``last_item_id``.

    Examples:
        >>> page, cursor = await client.get_history(page_size(100))
        >>> while cursor is not None:
        ...     page, cursor = await cursor()
    """

    def __init__(self, fetch: FetchHistory, last_item_id: str, queries: tuple[QueryParam, ...]) -> None:
        self._fetch = fetch
        self._queries = queries
        self.last_item_id = last_item_id

    async def __call__(self, *queries: QueryParam) -> tuple[HistoryPage, Optional[HistoryCursor]]:
        overridden = {query.key for query in queries} | {START_AFTER}
        carried = [query for query in self._queries if query.key not in overridden]
        extra = [query for query in queries if query.key != START_AFTER]
        return await self._fetch(*carried, *extra, start_after(self.last_item_id))

    def __repr__(self) -> str:
        return f"HistoryCursor(last_item_id={self.last_item_id!r})"


def next_cursor(fetch: FetchHistory, page: HistoryPage, queries: tuple[QueryParam, ...]) -> Optional[HistoryCursor]:
    """Cursor for the page after ``page``, or ``None`` when it was the last one."""
    if not page.has_more:
        return None
    return HistoryCursor(fetch, page.last_history_item_id, queries)


async def iter_pages(fetch: FetchHistory, *queries: QueryParam) -> AsyncIterator[HistoryPage]:
    """Yield history pages lazily, starting from the first one."""
    page, cursor = await fetch(*queries)
    yield page
    while cursor is not None:
        page, cursor = await cursor()
        yield page
