"""Notion-backed content layer for a personal blog and journal."""

__version__ = "0.1.0"
