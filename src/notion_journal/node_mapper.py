"""Map Notion blocks onto ContentNode models."""

import logging
from typing import Any, Callable

from pydantic import ValidationError

from notion_journal.models import ContentNode, NodeKind
from notion_journal.record_mapper import plain_text

logger = logging.getLogger(__name__)

DEFAULT_CODE_LANGUAGE = "text"


def _text_node(kind: NodeKind, payload: dict[str, Any]) -> ContentNode:
    return ContentNode(kind=kind, text=plain_text(payload["rich_text"]))


def _code_node(kind: NodeKind, payload: dict[str, Any]) -> ContentNode:
    return ContentNode(
        kind=kind,
        text=plain_text(payload["rich_text"]),
        code_language=payload.get("language") or DEFAULT_CODE_LANGUAGE,
    )


def _image_node(kind: NodeKind, payload: dict[str, Any]) -> ContentNode:
    # Exactly one of "external" or "file" is populated, named by "type".
    source = "external" if payload.get("type") == "external" else "file"
    url = (payload.get(source) or {}).get("url")
    return ContentNode(
        kind=kind,
        text=plain_text(payload.get("caption") or []),
        media_url=url,
    )


def _divider_node(kind: NodeKind, payload: dict[str, Any]) -> ContentNode:
    return ContentNode(kind=kind, text="")


_EXTRACTORS: dict[NodeKind, Callable[[NodeKind, dict[str, Any]], ContentNode]] = {
    NodeKind.PARAGRAPH: _text_node,
    NodeKind.HEADING_1: _text_node,
    NodeKind.HEADING_2: _text_node,
    NodeKind.HEADING_3: _text_node,
    NodeKind.BULLETED_LIST_ITEM: _text_node,
    NodeKind.NUMBERED_LIST_ITEM: _text_node,
    NodeKind.QUOTE: _text_node,
    NodeKind.CALLOUT: _text_node,
    NodeKind.CODE: _code_node,
    NodeKind.IMAGE: _image_node,
    NodeKind.DIVIDER: _divider_node,
}

SUPPORTED_KINDS = frozenset(kind.value for kind in _EXTRACTORS)


def node_kind(node: Any) -> str | None:
    """Return the declared block type, or None if there is none."""
    if not isinstance(node, dict):
        return None
    kind = node.get("type")
    return kind if isinstance(kind, str) else None


def is_supported_kind(kind: str | None) -> bool:
    """Return True if blocks of this type are mapped rather than dropped."""
    return kind in SUPPORTED_KINDS


def map_node(node: dict[str, Any]) -> ContentNode | None:
    """Convert one Notion block into a ContentNode.

    Args:
        node: Raw block object from a children listing.

    Returns:
        The mapped node, or None if the block type is not supported or the
        block payload is malformed. Never raises.
    """
    kind = node_kind(node)
    if not is_supported_kind(kind):
        return None

    node_type = NodeKind(kind)
    try:
        payload = node[kind]
        if not isinstance(payload, dict):
            return None
        return _EXTRACTORS[node_type](node_type, payload)
    except (KeyError, TypeError, AttributeError, ValueError, ValidationError) as e:
        logger.debug("Could not decode %s block %s: %s", kind, node.get("id"), e)
        return None
