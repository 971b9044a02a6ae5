"""Content service: the read API the page loaders use.

Every operation is a fresh round trip to Notion. Failures of a single page
or block drop only that item; failures of Notion itself turn the whole
operation into an empty result. Nothing here raises to the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from notion_journal.exceptions import SourceUnavailable
from notion_journal.models import (
    ContentDocument,
    ContentNode,
    ContentSummary,
    Diagnostic,
    DiagnosticReason,
)
from notion_journal.node_mapper import is_supported_kind, map_node, node_kind
from notion_journal.notion_client import NotionClient
from notion_journal.record_mapper import (
    FEATURED_PROPERTY,
    PUBLISH_DATE_PROPERTY,
    PUBLISHED_PROPERTY,
    SLUG_PROPERTY,
    TAGS_PROPERTY,
    map_record,
)

logger = logging.getLogger(__name__)

PUBLISH_DATE_DESCENDING = [{"property": PUBLISH_DATE_PROPERTY, "direction": "descending"}]


def build_filter(
    published_only: bool = True,
    featured_only: bool = False,
    tag: str | None = None,
) -> dict[str, Any] | None:
    """Build a conjunctive Notion filter, or None when nothing is filtered."""
    clauses: list[dict[str, Any]] = []

    if published_only:
        clauses.append({"property": PUBLISHED_PROPERTY, "checkbox": {"equals": True}})

    if featured_only:
        clauses.append({"property": FEATURED_PROPERTY, "checkbox": {"equals": True}})

    if tag:
        clauses.append({"property": TAGS_PROPERTY, "multi_select": {"contains": tag}})

    return {"and": clauses} if clauses else None


def _report(
    diagnostics: list[Diagnostic] | None,
    reason: DiagnosticReason,
    item_id: str | None,
    detail: str,
) -> None:
    if reason is DiagnosticReason.SOURCE_UNAVAILABLE:
        logger.error(detail)
    else:
        logger.warning(detail)
    if diagnostics is not None:
        diagnostics.append(Diagnostic(reason=reason, item_id=item_id, detail=detail))


class ContentService:
    """Lists and fetches blog content from a Notion database."""

    def __init__(self, client: NotionClient | Any) -> None:
        """
        Args:
            client: NotionClient instance (or mock for testing).
        """
        self._client = client

    def _map_records(
        self,
        records: list[dict[str, Any]],
        diagnostics: list[Diagnostic] | None,
    ) -> list[ContentSummary]:
        retrieved_at = datetime.now(timezone.utc)
        summaries: list[ContentSummary] = []

        for record in records:
            summary = map_record(record, now=retrieved_at)
            if summary is None:
                record_id = record.get("id") if isinstance(record, dict) else None
                _report(
                    diagnostics,
                    DiagnosticReason.MALFORMED_RECORD,
                    record_id,
                    f"Page {record_id} could not be mapped",
                )
                continue
            summaries.append(summary)

        return summaries

    def _map_nodes(
        self,
        nodes: list[dict[str, Any]],
        diagnostics: list[Diagnostic] | None,
    ) -> list[ContentNode]:
        mapped: list[ContentNode] = []

        for node in nodes:
            content_node = map_node(node)
            if content_node is not None:
                mapped.append(content_node)
                continue

            kind = node_kind(node)
            node_id = node.get("id") if isinstance(node, dict) else None
            if is_supported_kind(kind):
                _report(
                    diagnostics,
                    DiagnosticReason.MALFORMED_NODE,
                    node_id,
                    f"Error parsing block {node_id} of type {kind}",
                )
            else:
                _report(
                    diagnostics,
                    DiagnosticReason.UNRECOGNIZED_NODE_KIND,
                    node_id,
                    f"Unsupported block type: {kind}",
                )

        return mapped

    async def _fetch_nodes(
        self,
        record_id: str,
        diagnostics: list[Diagnostic] | None,
    ) -> list[ContentNode]:
        """Walk every page of a record's blocks, one page after another."""
        nodes: list[ContentNode] = []
        cursor: str | None = None

        while True:
            page, cursor = await self._client.list_child_nodes(record_id, start_cursor=cursor)
            nodes.extend(self._map_nodes(page, diagnostics))
            if not cursor:
                break

        return nodes

    async def list_summaries(
        self,
        published_only: bool = True,
        featured_only: bool = False,
        tag: str | None = None,
        diagnostics: list[Diagnostic] | None = None,
    ) -> list[ContentSummary]:
        """List post summaries, newest first.

        Args:
            published_only: Only include posts with Published checked.
            featured_only: Only include posts with Featured checked.
            tag: Only include posts carrying this tag.
            diagnostics: Optional list collecting dropped items.

        Returns:
            Summaries sorted by publish date descending. Posts with equal
            dates keep the order Notion returned them in. Empty if Notion
            is unavailable.
        """
        try:
            records = await self._client.query(
                filter=build_filter(published_only, featured_only, tag),
                sorts=PUBLISH_DATE_DESCENDING,
            )
        except SourceUnavailable as e:
            _report(
                diagnostics,
                DiagnosticReason.SOURCE_UNAVAILABLE,
                None,
                f"Error fetching blog posts: {e}",
            )
            return []

        summaries = self._map_records(records, diagnostics)
        return sorted(summaries, key=lambda s: s.publish_date, reverse=True)

    async def get_document_by_slug(
        self,
        slug: str,
        diagnostics: list[Diagnostic] | None = None,
    ) -> ContentDocument | None:
        """Fetch one post with its full body.

        Args:
            slug: The post's Slug property.
            diagnostics: Optional list collecting dropped items.

        Returns:
            The document, or None if no page matches, the matching page
            cannot be mapped, or Notion is unavailable.
        """
        try:
            records = await self._client.query(
                filter={"property": SLUG_PROPERTY, "rich_text": {"equals": slug}},
            )
            if not records:
                return None

            if len(records) > 1:
                logger.warning(
                    "Slug %r matches %d pages; using the first", slug, len(records)
                )

            summaries = self._map_records(records[:1], diagnostics)
            if not summaries:
                return None
            summary = summaries[0]

            nodes = await self._fetch_nodes(summary.id, diagnostics)
        except SourceUnavailable as e:
            _report(
                diagnostics,
                DiagnosticReason.SOURCE_UNAVAILABLE,
                slug,
                f"Error fetching blog post by slug: {e}",
            )
            return None

        return ContentDocument(**summary.model_dump(), nodes=tuple(nodes))

    async def list_all_tags(
        self,
        diagnostics: list[Diagnostic] | None = None,
    ) -> list[str]:
        """Return every tag used by a published post, sorted and unique."""
        summaries = await self.list_summaries(published_only=True, diagnostics=diagnostics)

        tags: set[str] = set()
        for summary in summaries:
            tags.update(summary.tags)

        return sorted(tags)
