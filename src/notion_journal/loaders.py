"""Page loaders for the blog and journal routes.

Each loader calls the content service and shapes the page data for
rendering. Responses are cached by the CDN for a fixed window and then
regenerated on the next request, so every response carries the same
cache-control directive.

Loaders return API Gateway-style dicts with ``statusCode``, ``headers`` and
a JSON-serialisable ``body``.
"""

import logging
from collections.abc import Mapping
from typing import Any

from notion_journal.content_service import ContentService
from notion_journal.dates import format_date
from notion_journal.exceptions import DocumentNotFound
from notion_journal.models import ContentDocument, ContentSummary

logger = logging.getLogger(__name__)

REVALIDATE_SECONDS = 3600
CACHE_CONTROL = f"public, max-age={REVALIDATE_SECONDS}"
NO_STORE = "no-store"


def _success_response(body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": 200,
        "headers": {"cache-control": CACHE_CONTROL},
        "body": body,
    }


def _error_response(status_code: int, message: str) -> dict[str, Any]:
    """Build an error response.

    Error messages are generic to avoid leaking API keys, database ids or
    stack traces to visitors. A 404 is cached like a page; server errors
    are never cached.
    """
    cache_control = NO_STORE if status_code >= 500 else CACHE_CONTROL
    return {
        "statusCode": status_code,
        "headers": {"cache-control": cache_control},
        "body": {"error": message},
    }


def serialize_post(post: ContentSummary) -> dict[str, Any]:
    """Dump a summary or document to JSON-ready data for a template."""
    data = post.model_dump(mode="json")
    data["display_date"] = format_date(post.publish_date)
    return data


async def load_blog_index(
    service: ContentService, query: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Blog listing with optional ``tag`` and ``featured=true`` filters."""
    query = query or {}
    tag = query.get("tag") or None
    featured = query.get("featured") == "true"

    try:
        posts = await service.list_summaries(
            published_only=True,
            featured_only=featured,
            tag=tag,
        )
        tags = await service.list_all_tags()
    except Exception:
        logger.exception("Blog index loader failed")
        return _error_response(500, "Internal server error")

    return _success_response(
        {
            "posts": [serialize_post(post) for post in posts],
            "tags": tags,
            "selected_tag": tag,
            "show_featured_only": featured,
        }
    )


async def load_journal_index(service: ContentService) -> dict[str, Any]:
    """Journal listing of every published post."""
    try:
        posts = await service.list_summaries(published_only=True)
    except Exception:
        logger.exception("Journal index loader failed")
        return _error_response(500, "Internal server error")

    return _success_response({"posts": [serialize_post(post) for post in posts]})


async def fetch_published_post(service: ContentService, slug: str) -> ContentDocument:
    """Return the published document for a slug.

    Raises:
        DocumentNotFound: If no page matches or the page is not published.
    """
    post = await service.get_document_by_slug(slug)

    # Drafts are reachable by slug in Notion but must not be served.
    if post is None or not post.published:
        raise DocumentNotFound(slug)

    return post


async def load_journal_post(service: ContentService, slug: str) -> dict[str, Any]:
    """Single journal entry with its body.

    Response codes:
        200: Success - body contains ``post``
        404: No published post with this slug
        500: Internal failure
    """
    if not slug or not slug.strip():
        return _error_response(404, "Blog post not found")

    try:
        post = await fetch_published_post(service, slug)
    except DocumentNotFound:
        return _error_response(404, "Blog post not found")
    except Exception:
        logger.exception("Journal post loader failed for slug %r", slug)
        return _error_response(500, "Internal server error")

    return _success_response({"post": serialize_post(post)})
