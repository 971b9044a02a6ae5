"""Map Notion database pages onto ContentSummary models.

Notion returns page properties as an open-ended mapping where every value
carries a ``type`` discriminant and a payload under the key of the same
name::

    {"Slug": {"id": "...", "type": "rich_text", "rich_text": [...]}}

Each field is decoded on its own. A property that is missing, or whose
declared type is not the one expected, falls back to the field default, so
a single odd column never blocks the rest of the record.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from notion_journal.models import ContentSummary

logger = logging.getLogger(__name__)

TITLE_PROPERTY = "Title"
SLUG_PROPERTY = "Slug"
DESCRIPTION_PROPERTY = "Description"
PUBLISHED_PROPERTY = "Published"
FEATURED_PROPERTY = "Featured"
PUBLISH_DATE_PROPERTY = "PublishDate"
TAGS_PROPERTY = "Tags"
COVER_IMAGE_PROPERTY = "OGImage"


def plain_text(rich_text: Any) -> str:
    """Concatenate the plain text of every run in a rich text array."""
    if not isinstance(rich_text, list):
        return ""
    return "".join(
        run.get("plain_text") or "" for run in rich_text if isinstance(run, dict)
    )


def read_property(properties: dict[str, Any], name: str, expected_type: str) -> Any:
    """Return the payload of a property if it has the expected type.

    Args:
        properties: The page's property mapping.
        name: Property name as configured in the database.
        expected_type: Notion property type, e.g. ``"checkbox"``.

    Returns:
        The type-specific payload, or None if the property is absent or
        declared with a different type.
    """
    prop = properties.get(name)
    if not isinstance(prop, dict) or prop.get("type") != expected_type:
        return None
    return prop.get(expected_type)


def _read_text(properties: dict[str, Any], name: str, expected_type: str) -> str:
    return plain_text(read_property(properties, name, expected_type))


def _read_checkbox(properties: dict[str, Any], name: str) -> bool:
    return read_property(properties, name, "checkbox") is True


def _read_date(properties: dict[str, Any], name: str, default: datetime) -> datetime:
    payload = read_property(properties, name, "date")
    if not isinstance(payload, dict) or not payload.get("start"):
        return default
    try:
        parsed = datetime.fromisoformat(payload["start"])
    except (TypeError, ValueError):
        return default
    # Date-only values come back naive; keep every timestamp comparable.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _read_tags(properties: dict[str, Any], name: str) -> tuple[str, ...]:
    options = read_property(properties, name, "multi_select")
    if not isinstance(options, list):
        return ()
    tags: list[str] = []
    for option in options:
        tag = option.get("name") if isinstance(option, dict) else None
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _read_url(properties: dict[str, Any], name: str) -> str | None:
    url = read_property(properties, name, "url")
    return url if isinstance(url, str) and url else None


def is_full_page(record: Any) -> bool:
    """Partial page objects carry no properties and cannot be mapped."""
    return isinstance(record, dict) and isinstance(record.get("properties"), dict)


def map_record(
    record: dict[str, Any], *, now: datetime | None = None
) -> ContentSummary | None:
    """Convert one Notion page into a ContentSummary.

    Args:
        record: Raw page object from a database query.
        now: Timestamp used when the page has no usable publish date.
            Defaults to the current time.

    Returns:
        The mapped summary, or None if the page is not a full page, lacks a
        title or slug, or has a shape that cannot be decoded. Never raises.
    """
    if not is_full_page(record):
        return None

    properties = record["properties"]
    retrieved_at = now or datetime.now(timezone.utc)

    try:
        title = _read_text(properties, TITLE_PROPERTY, "title")
        slug = _read_text(properties, SLUG_PROPERTY, "rich_text")
        if not title.strip() or not slug.strip():
            return None

        return ContentSummary(
            id=str(record["id"]),
            title=title,
            slug=slug,
            description=_read_text(properties, DESCRIPTION_PROPERTY, "rich_text"),
            publish_date=_read_date(properties, PUBLISH_DATE_PROPERTY, retrieved_at),
            tags=_read_tags(properties, TAGS_PROPERTY),
            featured=_read_checkbox(properties, FEATURED_PROPERTY),
            published=_read_checkbox(properties, PUBLISHED_PROPERTY),
            cover_image_url=_read_url(properties, COVER_IMAGE_PROPERTY),
        )
    except (KeyError, TypeError, AttributeError, ValueError, ValidationError) as e:
        logger.debug("Could not decode page %s: %s", record.get("id"), e)
        return None
