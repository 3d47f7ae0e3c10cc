from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the search client + TUI.

    Values are loaded from environment variables and `.env`.

    Notes:
    - Empty search parameters mean "let the API decide".
    - Logs go to a file; the TUI owns the terminal while it runs.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Stack Exchange API
    STACKQ_API_URL: str = Field(default="https://api.stackexchange.com/2.3")
    STACKQ_API_KEY: str | None = Field(default=None)
    STACKQ_TIMEOUT: float = Field(default=20.0, gt=0)
    STACKQ_PAGE_SIZE: int = Field(default=30, ge=1, le=100)
    # Named API filter. Empty: one with body_markdown and comments is created at first search.
    STACKQ_FILTER: str = Field(default="")

    # Default search parameters (CLI options override these)
    STACKQ_SITE: str = Field(default="stackoverflow")
    STACKQ_TAGS: str = Field(default="")
    STACKQ_SORT: str = Field(default="relevance")
    STACKQ_ORDER: str = Field(default="desc")

    # TUI
    STACKQ_NOTIFICATION_SECONDS: float = Field(default=3.0, gt=0)
    STACKQ_MOUSE: bool = Field(default=True)

    # Logging (diagnostic; rotated daily)
    STACKQ_LOG_DIR: Path = Field(default=Path("~/.stackq/logs"))
    STACKQ_LOG_LEVEL: str = Field(default="INFO")
    STACKQ_LOG_BACKUP_COUNT: int = Field(default=7)


def load_settings() -> Settings:
    s = Settings()
    s.STACKQ_API_URL = s.STACKQ_API_URL.rstrip("/")
    s.STACKQ_LOG_DIR = s.STACKQ_LOG_DIR.expanduser()
    return s
