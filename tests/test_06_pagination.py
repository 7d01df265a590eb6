import pytest
from _utils import MockResponse
from _utils import get_client
from _utils import mock_api

from elevenlabs_tts import HistoryCursor
from elevenlabs_tts import HistoryPage
from elevenlabs_tts import ServerError
from elevenlabs_tts import page_size
from elevenlabs_tts import start_after


def history_page(*item_ids: str, has_more: bool) -> MockResponse:
    return MockResponse(
        body={
            "history": [{"history_item_id": item_id, "text": f"text {item_id}"} for item_id in item_ids],
            "last_history_item_id": item_ids[-1] if item_ids else "",
            "has_more": has_more,
        }
    )


@pytest.mark.asyncio
async def test_last_page_has_no_cursor():
    async with mock_api(history_page("a", "b", has_more=False)) as api:
        async with get_client(api.url) as client:
            page, cursor = await client.get_history()

    assert [item.history_item_id for item in page.history] == ["a", "b"]
    assert cursor is None
    assert api.last.path == "/v1/history"
    assert api.last.query_string == ""


@pytest.mark.asyncio
async def test_cursor_continues_after_last_item():
    async with mock_api(history_page("a", "b", has_more=True), history_page("c", has_more=False)) as api:
        async with get_client(api.url) as client:
            page, cursor = await client.get_history()
            assert isinstance(cursor, HistoryCursor)
            assert cursor.last_item_id == "b"

            page, cursor = await cursor()

    assert [item.history_item_id for item in page.history] == ["c"]
    assert cursor is None
    assert api.requests[1].query == [("start_after_history_item_id", "b")]


@pytest.mark.asyncio
async def test_cursor_keeps_original_modifiers():
    async with mock_api(
        history_page("a", has_more=True),
        history_page("b", has_more=True),
        history_page("c", has_more=False),
    ) as api:
        async with get_client(api.url) as client:
            _, cursor = await client.get_history(page_size(1))
            _, cursor = await cursor()
            _, cursor = await cursor()

    assert cursor is None
    assert [r.query for r in api.requests] == [
        [("page_size", "1")],
        [("page_size", "1"), ("start_after_history_item_id", "a")],
        [("page_size", "1"), ("start_after_history_item_id", "b")],
    ]


@pytest.mark.asyncio
async def test_cursor_modifiers_override_original():
    async with mock_api(history_page("a", has_more=True), history_page("b", has_more=False)) as api:
        async with get_client(api.url) as client:
            _, cursor = await client.get_history(page_size(1))
            await cursor(page_size(50))

    assert api.last.query == [("page_size", "50"), ("start_after_history_item_id", "a")]


@pytest.mark.asyncio
async def test_cursor_replaces_stale_start_after():
    """Test an explicit start_after on the first call is not repeated on later pages."""
    async with mock_api(history_page("b", has_more=True), history_page("c", has_more=False)) as api:
        async with get_client(api.url) as client:
            _, cursor = await client.get_history(start_after("a"), page_size(1))
            await cursor(start_after("zzz"))

    assert api.requests[0].query == [("start_after_history_item_id", "a"), ("page_size", "1")]
    assert api.last.query == [("page_size", "1"), ("start_after_history_item_id", "b")]


@pytest.mark.asyncio
async def test_cursor_sends_single_start_after():
    calls = []

    async def fetch(*queries):
        calls.append(queries)
        return HistoryPage(), None

    cursor = HistoryCursor(fetch, "last", (page_size(10), start_after("old")))
    await cursor(start_after("caller"), page_size(5))

    assert calls == [(page_size(5), start_after("last"))]


@pytest.mark.asyncio
async def test_cursor_call_propagates_errors():
    async with mock_api(history_page("a", has_more=True), MockResponse(status=500)) as api:
        async with get_client(api.url) as client:
            _, cursor = await client.get_history()
            with pytest.raises(ServerError):
                await cursor()


@pytest.mark.asyncio
async def test_iter_history_walks_every_page():
    async with mock_api(
        history_page("a", "b", has_more=True),
        history_page("c", "d", has_more=True),
        history_page("e", has_more=False),
    ) as api:
        async with get_client(api.url) as client:
            item_ids = [item.history_item_id async for page in client.iter_history(page_size(2)) for item in page.history]

    assert item_ids == ["a", "b", "c", "d", "e"]
    assert len(api.requests) == 3
    assert api.last.query == [("page_size", "2"), ("start_after_history_item_id", "d")]


@pytest.mark.asyncio
async def test_iter_history_single_empty_page():
    async with mock_api(history_page(has_more=False)) as api:
        async with get_client(api.url) as client:
            pages = [page async for page in client.iter_history()]

    assert len(pages) == 1
    assert pages[0].history == []
