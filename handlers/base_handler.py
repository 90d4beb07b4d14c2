"""Base handler class for StoryMate file events."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class HandlerResult(BaseModel):
    """Result from processing a batch of file events."""

    success: bool = Field(description="Whether every eligible file was processed")
    message: str = Field(description="Human-readable result message")
    files_written: list[str] = Field(default_factory=list, description="Companion files written")
    files_skipped: list[str] = Field(default_factory=list, description="Files rejected by the filter")
    errors: list[str] = Field(default_factory=list, description="Per-file errors encountered")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Start timestamp")
    completed_at: datetime | None = Field(default=None, description="Completion timestamp")

    @property
    def duration_seconds(self) -> float | None:
        """Calculate execution duration in seconds."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()


class BaseHandler(ABC):
    """Abstract base class for file event handlers."""

    name: str = "base_handler"
    description: str = "Base handler"

    def __init__(self, settings: Settings | None = None):
        """Initialize the handler."""
        self.settings = settings or get_settings()

    @abstractmethod
    async def run(self, **kwargs) -> HandlerResult:
        """Process one batch of file events."""
        pass

    def log(self, message: str, level: str = "info") -> None:
        """Log a message tagged with the handler name."""
        logger.log(logging.getLevelName(level.upper()), f"[{self.name}] {message}")

    def create_result(
        self,
        success: bool,
        message: str,
        files_written: list[str] | None = None,
        files_skipped: list[str] | None = None,
        errors: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
        started_at: datetime | None = None,
    ) -> HandlerResult:
        """Create a handler result."""
        return HandlerResult(
            success=success,
            message=message,
            files_written=files_written or [],
            files_skipped=files_skipped or [],
            errors=errors or [],
            metadata=metadata or {},
            started_at=started_at or datetime.now(UTC),
            completed_at=datetime.now(UTC),
        )
