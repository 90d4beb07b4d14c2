"""Pydantic settings for StoryMate."""

import locale
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler


class Settings(BaseSettings):
    """Runtime settings for the StoryMate tool itself.

    Project-level options (watch directories, template path, extensions)
    live in the workspace settings file and are resolved per batch by
    ``config.story_config.resolve_config``.
    """

    model_config = SettingsConfigDict(
        env_prefix="STORYMATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Workspace Configuration
    workspace_root: Path = Field(default_factory=Path.cwd, description="Root of the watched workspace")
    settings_file: str = Field(
        default=".storymate.yaml",
        description="Workspace-relative YAML file holding the storyMate section",
    )

    # Watcher Configuration
    watch_debounce_seconds: float = Field(
        default=0.2, description="Seconds to wait for more events before processing a batch"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # Run Configuration
    dry_run: bool = Field(default=False, description="Render companion files without writing them")
    verbose: bool = Field(default=False, description="Verbose output")

    @property
    def settings_path(self) -> Path:
        """Return the absolute path of the workspace settings file."""
        return self.workspace_root / self.settings_file

    @field_validator("workspace_root", mode="before")
    @classmethod
    def validate_workspace_root(cls, v: str | Path) -> Path:
        """Convert string path to an absolute Path object."""
        return Path(v).expanduser().resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()


def configure_logging(settings: Settings) -> None:
    """Route the root logger through rich at the configured level."""
    level = logging.DEBUG if settings.verbose else getattr(logging, settings.log_level, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )


def configure_collation() -> None:
    """Sort variant keys by the user's locale instead of the C locale."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.getLogger(__name__).debug(f"[LOCALE] Keeping default collation: {e}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
