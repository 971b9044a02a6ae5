"""Configuration management via environment variables."""

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_NOTION_VERSION = "2022-06-28"


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    notion_api_key: str
    notion_database_id: str
    notion_version: str = DEFAULT_NOTION_VERSION
    notion_timeout: float = 10.0

    @field_validator("notion_api_key", "notion_database_id")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v

    @field_validator("notion_timeout")
    @classmethod
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v
