"""Unit tests for the Notion API client.

These tests use respx to mock HTTP responses, ensuring we never hit
the real Notion API during unit tests.
"""

import json

import httpx
import pytest
import respx

from notion_journal.content_service import ContentService
from notion_journal.exceptions import RateLimitError, SourceUnavailable
from notion_journal.models import Diagnostic, DiagnosticReason
from notion_journal.notion_client import NotionClient

DATABASE_ID = "db-123"
QUERY_URL = f"https://api.notion.com/v1/databases/{DATABASE_ID}/query"
CHILDREN_URL = "https://api.notion.com/v1/blocks/page-1/children"


# --- Fixtures ---


@pytest.fixture
def api_key() -> str:
    """Provide a test API key."""
    return "secret_test-key-12345"


@pytest.fixture
def client(api_key: str) -> NotionClient:
    """Create a NotionClient instance for testing."""
    return NotionClient(api_key=api_key, database_id=DATABASE_ID)


def page(page_id: str) -> dict:
    return {"object": "page", "id": page_id, "properties": {}}


# --- Client Instantiation Tests ---


def test_client_requires_api_key():
    """Client without API key should refuse to instantiate."""
    with pytest.raises(ValueError, match="API key"):
        NotionClient(api_key="", database_id=DATABASE_ID)

    with pytest.raises(ValueError, match="API key"):
        NotionClient(api_key="   ", database_id=DATABASE_ID)


def test_client_requires_database_id(api_key: str):
    """Client without database id should refuse to instantiate."""
    with pytest.raises(ValueError, match="Database ID"):
        NotionClient(api_key=api_key, database_id=" ")


# --- Query Tests ---


@pytest.mark.asyncio
@respx.mock
async def test_query_returns_results(client: NotionClient):
    """A single-page query should return the raw result objects."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(
            200,
            json={"results": [page("a"), page("b")], "has_more": False, "next_cursor": None},
        )
    )

    results = await client.query()

    assert [r["id"] for r in results] == ["a", "b"]


@pytest.mark.asyncio
@respx.mock
async def test_query_sends_filter_and_sorts(client: NotionClient):
    """Filter and sort directives should be sent in the request body."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(200, json={"results": [], "has_more": False})
    )
    query_filter = {"and": [{"property": "Published", "checkbox": {"equals": True}}]}
    sorts = [{"property": "PublishDate", "direction": "descending"}]

    await client.query(filter=query_filter, sorts=sorts)

    body = json.loads(respx.calls.last.request.content)
    assert body["filter"] == query_filter
    assert body["sorts"] == sorts
    assert "start_cursor" not in body


@pytest.mark.asyncio
@respx.mock
async def test_query_omits_filter_when_none(client: NotionClient):
    """No filter means no filter key at all, not a null filter."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(200, json={"results": [], "has_more": False})
    )

    await client.query()

    body = json.loads(respx.calls.last.request.content)
    assert "filter" not in body


@pytest.mark.asyncio
@respx.mock
async def test_query_follows_pagination(client: NotionClient):
    """Query should keep requesting pages until has_more is false."""
    route = respx.post(QUERY_URL).mock(
        side_effect=[
            httpx.Response(
                200, json={"results": [page("a")], "has_more": True, "next_cursor": "c1"}
            ),
            httpx.Response(
                200, json={"results": [page("b")], "has_more": False, "next_cursor": None}
            ),
        ]
    )

    results = await client.query()

    assert [r["id"] for r in results] == ["a", "b"]
    assert route.call_count == 2
    second_body = json.loads(route.calls[1].request.content)
    assert second_body["start_cursor"] == "c1"


@pytest.mark.asyncio
@respx.mock
async def test_query_sends_auth_and_version_headers(client: NotionClient, api_key: str):
    """API key goes in the Authorization header, never in the URL."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(200, json={"results": [], "has_more": False})
    )

    await client.query()

    request = respx.calls.last.request
    assert request.headers["Authorization"] == f"Bearer {api_key}"
    assert request.headers["Notion-Version"] == "2022-06-28"
    assert api_key not in str(request.url)


# --- Child Node Listing Tests ---


@pytest.mark.asyncio
@respx.mock
async def test_list_child_nodes_returns_page_and_cursor(client: NotionClient):
    """One call returns one page of blocks plus the next cursor."""
    respx.get(CHILDREN_URL).mock(
        return_value=httpx.Response(
            200,
            json={"results": [{"id": "b1"}], "has_more": True, "next_cursor": "c1"},
        )
    )

    nodes, cursor = await client.list_child_nodes("page-1")

    assert nodes == [{"id": "b1"}]
    assert cursor == "c1"
    assert "page_size=100" in str(respx.calls.last.request.url)


@pytest.mark.asyncio
@respx.mock
async def test_list_child_nodes_passes_start_cursor(client: NotionClient):
    """The previous cursor should be sent as start_cursor."""
    respx.get(CHILDREN_URL).mock(
        return_value=httpx.Response(200, json={"results": [], "has_more": False})
    )

    await client.list_child_nodes("page-1", start_cursor="c2")

    assert "start_cursor=c2" in str(respx.calls.last.request.url)


@pytest.mark.asyncio
@respx.mock
async def test_list_child_nodes_ignores_cursor_without_more_pages(client: NotionClient):
    """A stale next_cursor with has_more false means no more pages."""
    respx.get(CHILDREN_URL).mock(
        return_value=httpx.Response(
            200, json={"results": [], "has_more": False, "next_cursor": "stale"}
        )
    )

    _, cursor = await client.list_child_nodes("page-1")

    assert cursor is None


# --- Error Handling Tests ---


@pytest.mark.asyncio
@respx.mock
async def test_query_handles_api_error(client: NotionClient):
    """API 500 should raise SourceUnavailable with the status code."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(500, json={"message": "Internal server error"})
    )

    with pytest.raises(SourceUnavailable) as exc_info:
        await client.query()

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
@respx.mock
async def test_query_handles_unauthorized(client: NotionClient, api_key: str):
    """API 401 should raise SourceUnavailable without echoing the key."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(401, json={"code": "unauthorized"})
    )

    with pytest.raises(SourceUnavailable) as exc_info:
        await client.query()

    assert exc_info.value.status_code == 401
    assert api_key not in str(exc_info.value)


@pytest.mark.asyncio
@respx.mock
async def test_query_handles_rate_limit(client: NotionClient):
    """API 429 should raise RateLimitError, a kind of SourceUnavailable."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(429, json={"code": "rate_limited"})
    )

    with pytest.raises(RateLimitError) as exc_info:
        await client.query()

    assert isinstance(exc_info.value, SourceUnavailable)


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_becomes_source_unavailable(client: NotionClient):
    """Network failures should surface as SourceUnavailable."""
    respx.get(CHILDREN_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

    with pytest.raises(SourceUnavailable):
        await client.list_child_nodes("page-1")


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_becomes_source_unavailable(client: NotionClient):
    """A non-JSON body should surface as SourceUnavailable."""
    respx.post(QUERY_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(SourceUnavailable):
        await client.query()


@pytest.mark.parametrize("results", [None, {"id": "a"}, "nope"])
@pytest.mark.asyncio
@respx.mock
async def test_query_rejects_non_list_results(client: NotionClient, results):
    """A 200 whose results is not a list is a broken response, not an empty one."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(200, json={"results": results, "has_more": False})
    )

    with pytest.raises(SourceUnavailable, match="unexpected payload"):
        await client.query()


@pytest.mark.asyncio
@respx.mock
async def test_list_child_nodes_rejects_null_results(client: NotionClient):
    respx.get(CHILDREN_URL).mock(
        return_value=httpx.Response(200, json={"results": None, "has_more": False})
    )

    with pytest.raises(SourceUnavailable, match="unexpected payload"):
        await client.list_child_nodes("page-1")


# --- Service Degradation Tests ---


@pytest.mark.asyncio
@respx.mock
async def test_service_listing_survives_null_results(client: NotionClient):
    """Null results degrade the listing to empty instead of raising."""
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(200, json={"results": None, "has_more": False})
    )
    service = ContentService(client)

    assert await service.list_summaries() == []
    assert await service.list_all_tags() == []


@pytest.mark.asyncio
@respx.mock
async def test_service_document_survives_null_block_results(client: NotionClient):
    """Null block results make the document lookup return None instead of raising."""
    record = {
        "object": "page",
        "id": "page-1",
        "properties": {
            "Title": {"type": "title", "title": [{"plain_text": "Hello"}]},
            "Slug": {"type": "rich_text", "rich_text": [{"plain_text": "hello"}]},
        },
    }
    respx.post(QUERY_URL).mock(
        return_value=httpx.Response(200, json={"results": [record], "has_more": False})
    )
    respx.get(CHILDREN_URL).mock(
        return_value=httpx.Response(200, json={"results": None, "has_more": False})
    )
    diagnostics: list[Diagnostic] = []

    document = await ContentService(client).get_document_by_slug("hello", diagnostics=diagnostics)

    assert document is None
    assert [d.reason for d in diagnostics] == [DiagnosticReason.SOURCE_UNAVAILABLE]
