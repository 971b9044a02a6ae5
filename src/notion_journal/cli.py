"""Command-line interface for browsing the Notion journal."""

import asyncio
import logging
import sys

import click

from notion_journal.config import Config
from notion_journal.content_service import ContentService
from notion_journal.dates import format_date
from notion_journal.logging_config import setup_logging
from notion_journal.models import NodeKind
from notion_journal.notion_client import NotionClient


def build_service() -> ContentService:
    """Create a ContentService from environment configuration.

    Exits with status 1 if configuration is missing or invalid.
    """
    try:
        config = Config()
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    client = NotionClient(
        api_key=config.notion_api_key,
        database_id=config.notion_database_id,
        timeout=config.notion_timeout,
        notion_version=config.notion_version,
    )
    return ContentService(client)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Read blog posts and journal entries from Notion."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@main.command()
@click.option("--tag", default=None, help="Only show posts with this tag.")
@click.option("--featured", is_flag=True, help="Only show featured posts.")
@click.option("--all", "include_drafts", is_flag=True, help="Include unpublished posts.")
def posts(tag: str | None, featured: bool, include_drafts: bool) -> None:
    """List posts, newest first."""
    service = build_service()

    summaries = asyncio.run(
        service.list_summaries(
            published_only=not include_drafts,
            featured_only=featured,
            tag=tag,
        )
    )

    for summary in summaries:
        click.echo(f"{format_date(summary.publish_date)}  {summary.slug}  {summary.title}")
    click.echo(f"{len(summaries)} posts")


@main.command()
@click.argument("slug")
def post(slug: str) -> None:
    """Print one post as plain text.

    SLUG: The post's slug (e.g., "hello-world").
    """
    service = build_service()

    document = asyncio.run(service.get_document_by_slug(slug))
    if document is None:
        click.echo(f"Post not found: {slug}", err=True)
        sys.exit(1)

    click.echo(document.title)
    click.echo(format_date(document.publish_date))
    if document.tags:
        click.echo("Tags: " + ", ".join(document.tags))
    click.echo("")

    for node in document.nodes:
        if node.kind is NodeKind.DIVIDER:
            click.echo("---")
        elif node.kind is NodeKind.IMAGE:
            click.echo(f"[image: {node.media_url}] {node.text}".rstrip())
        elif node.kind is NodeKind.CODE:
            click.echo(f"```{node.code_language}\n{node.text}\n```")
        elif node.kind is NodeKind.BULLETED_LIST_ITEM:
            click.echo(f"- {node.text}")
        else:
            click.echo(node.text)


@main.command()
def tags() -> None:
    """List every tag used by a published post."""
    service = build_service()

    for tag in asyncio.run(service.list_all_tags()):
        click.echo(tag)


if __name__ == "__main__":
    main()
