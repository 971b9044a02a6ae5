"""Builders for Notion API payloads shared by the unit tests."""

from typing import Any, Callable

import pytest


def rich_text(*runs: str) -> list[dict[str, Any]]:
    return [
        {"type": "text", "plain_text": run, "annotations": {"bold": i % 2 == 1}}
        for i, run in enumerate(runs)
    ]


def build_record(
    page_id: str = "page-1",
    title: str | None = "Hello",
    slug: str | None = "hello",
    description: str | None = None,
    published: bool | None = True,
    featured: bool | None = None,
    publish_date: str | None = None,
    tags: list[str] | None = None,
    og_image: str | None = None,
) -> dict[str, Any]:
    """Build a Notion page object; None leaves the property out entirely."""
    properties: dict[str, Any] = {}
    if title is not None:
        properties["Title"] = {"id": "title", "type": "title", "title": rich_text(title)}
    if slug is not None:
        properties["Slug"] = {"id": "s", "type": "rich_text", "rich_text": rich_text(slug)}
    if description is not None:
        properties["Description"] = {
            "id": "d",
            "type": "rich_text",
            "rich_text": rich_text(description),
        }
    if published is not None:
        properties["Published"] = {"id": "p", "type": "checkbox", "checkbox": published}
    if featured is not None:
        properties["Featured"] = {"id": "f", "type": "checkbox", "checkbox": featured}
    if publish_date is not None:
        properties["PublishDate"] = {
            "id": "pd",
            "type": "date",
            "date": {"start": publish_date, "end": None, "time_zone": None},
        }
    if tags is not None:
        properties["Tags"] = {
            "id": "t",
            "type": "multi_select",
            "multi_select": [{"id": f"o{i}", "name": t} for i, t in enumerate(tags)],
        }
    if og_image is not None:
        properties["OGImage"] = {"id": "og", "type": "url", "url": og_image}

    return {"object": "page", "id": page_id, "properties": properties}


def build_block(kind: str, text: str = "", block_id: str = "block", **extra: Any) -> dict[str, Any]:
    """Build a Notion block whose payload holds a rich_text array."""
    payload: dict[str, Any] = {"rich_text": rich_text(text) if text else []}
    payload.update(extra)
    return {"object": "block", "id": block_id, "type": kind, kind: payload}


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    return build_record


@pytest.fixture
def make_block() -> Callable[..., dict[str, Any]]:
    return build_block
