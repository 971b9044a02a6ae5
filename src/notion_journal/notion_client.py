"""Notion API client for reading a single content database."""

from typing import Any

import httpx

from notion_journal.config import DEFAULT_NOTION_VERSION
from notion_journal.exceptions import RateLimitError, SourceUnavailable

NOTION_API_URL = "https://api.notion.com/v1"
PAGE_SIZE = 100


class NotionClient:
    """Client for querying one Notion database and reading page blocks."""

    def __init__(
        self,
        api_key: str,
        database_id: str,
        timeout: float = 10.0,
        notion_version: str = DEFAULT_NOTION_VERSION,
    ) -> None:
        """Initialize client with credentials.

        Args:
            api_key: Notion integration token.
            database_id: Identifier of the database holding the posts.
            timeout: Deadline in seconds for each HTTP call.
            notion_version: Value sent in the Notion-Version header.

        Raises:
            ValueError: If api_key or database_id is empty or whitespace-only.
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key must not be empty")
        if not database_id or not database_id.strip():
            raise ValueError("Database ID must not be empty")
        self._api_key = api_key
        self.database_id = database_id
        self._timeout = timeout
        self._notion_version = notion_version

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Notion-Version": self._notion_version,
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            RateLimitError: If the API returns a 429 response.
            SourceUnavailable: On any other HTTP error, transport failure,
                or a body that is not a JSON object.
        """
        try:
            async with httpx.AsyncClient(
                base_url=NOTION_API_URL,
                headers=self._headers(),
                timeout=self._timeout,
            ) as client:
                response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"Notion API unreachable: {type(e).__name__}") from e

        if response.status_code == 429:
            raise RateLimitError()

        if response.status_code >= 400:
            raise SourceUnavailable(
                f"Notion API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailable("Notion API returned invalid JSON") from e

        if not isinstance(data, dict):
            raise SourceUnavailable("Notion API returned an unexpected payload")

        return data

    @staticmethod
    def _results(data: dict[str, Any]) -> list[dict[str, Any]]:
        """Return the 'results' list of a paginated response.

        Raises:
            SourceUnavailable: If 'results' is missing or not a list.
        """
        results = data.get("results")
        if not isinstance(results, list):
            raise SourceUnavailable("Notion API returned an unexpected payload")
        return results

    async def query(
        self,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """Query the database, following every result page.

        Args:
            filter: Notion filter object, or None for no filtering.
            sorts: Notion sort directives.

        Returns:
            Raw page objects in the order Notion returned them.

        Raises:
            SourceUnavailable: If any page of the query fails.
        """
        body: dict[str, Any] = {"page_size": PAGE_SIZE}
        if filter is not None:
            body["filter"] = filter
        if sorts:
            body["sorts"] = sorts

        results: list[dict[str, Any]] = []
        while True:
            data = await self._request(
                "POST", f"/databases/{self.database_id}/query", json=body
            )
            results.extend(self._results(data))

            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break
            body["start_cursor"] = cursor

        return results

    async def list_child_nodes(
        self,
        record_id: str,
        start_cursor: str | None = None,
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Fetch one page of a record's child blocks.

        Args:
            record_id: Notion page id whose blocks to list.
            start_cursor: Cursor returned by the previous call, if any.

        Returns:
            The blocks on this page, and the cursor for the next page
            (None when there are no further pages).

        Raises:
            SourceUnavailable: If the API call fails.
        """
        params: dict[str, Any] = {"page_size": PAGE_SIZE}
        if start_cursor:
            params["start_cursor"] = start_cursor

        data = await self._request("GET", f"/blocks/{record_id}/children", params=params)

        next_cursor = data.get("next_cursor") if data.get("has_more") else None
        return self._results(data), next_cursor
