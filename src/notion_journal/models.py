"""Pydantic models for the local content model."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class NodeKind(str, Enum):
    """Closed set of Notion block types the site knows how to render."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    IMAGE = "image"
    DIVIDER = "divider"


class ContentSummary(BaseModel):
    """Metadata of one blog post or journal entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    slug: str
    description: str = ""
    publish_date: datetime
    tags: tuple[str, ...] = ()
    featured: bool = False
    published: bool = False
    cover_image_url: str | None = None

    @field_validator("title", "slug")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v


class ContentNode(BaseModel):
    """One renderable unit of a document body."""

    model_config = ConfigDict(frozen=True)

    kind: NodeKind
    text: str = ""
    code_language: str | None = None
    media_url: str | None = None
    children: tuple["ContentNode", ...] | None = None


class ContentDocument(ContentSummary):
    """A summary together with its ordered body nodes."""

    nodes: tuple[ContentNode, ...] = ()


class DiagnosticReason(str, Enum):
    MALFORMED_RECORD = "malformed_record"
    UNRECOGNIZED_NODE_KIND = "unrecognized_node_kind"
    MALFORMED_NODE = "malformed_node"
    SOURCE_UNAVAILABLE = "source_unavailable"


class Diagnostic(BaseModel):
    """Why an item was dropped from a result, or why a result is empty."""

    model_config = ConfigDict(frozen=True)

    reason: DiagnosticReason
    item_id: str | None = None
    detail: str = ""
