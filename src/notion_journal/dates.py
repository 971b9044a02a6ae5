"""Date display helpers."""

from datetime import datetime


def format_date(value: datetime) -> str:
    """Format a timestamp in the compact form used on the site, e.g. 10-23-2025."""
    return f"{value.month:02d}-{value.day:02d}-{value.year}"
