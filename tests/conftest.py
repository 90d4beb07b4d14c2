"""Shared fixtures for StoryMate tests."""

from pathlib import Path

import pytest

from config.settings import Settings, get_settings

BUTTON_SOURCE = """import { cva } from "class-variance-authority";

export const BUTTON_VARIANT: ButtonVariant[] = ["primary", "secondary"];
export const BUTTON_SIZE: ButtonSize[] = ["sm", "md", "lg"];

export interface ButtonProps {
  size?: ButtonSize;
  variant?: ButtonVariant;
}

const buttonStyles = cva("btn", {
  variants: {
    size: { sm: "h-8", md: "h-10", lg: "h-12" },
    variant: { primary: "bg-blue", secondary: "bg-gray" },
  },
  defaultVariants: { size: 'md', variant: "primary" },
});

export default function Button(props: ButtonProps) {
  return null;
}
"""

SIMPLE_BUTTON_SOURCE = """export const BUTTON_SIZE: ButtonSize[] = ["sm", "md"];

const styles = cva("btn", {
  defaultVariants: { size: 'md' },
});
"""


class RecordingNotifier:
    """Notifier double that keeps every message."""

    def __init__(self):
        self.warnings: list[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop the cached settings so CLI overrides don't leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def workspace(tmp_path) -> Path:
    """An empty workspace root."""
    return tmp_path


@pytest.fixture
def settings(workspace) -> Settings:
    return Settings(workspace_root=workspace)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_component(workspace):
    """Create a component file below the workspace and return its path."""

    def _make(relative_path: str, source: str = SIMPLE_BUTTON_SOURCE) -> Path:
        path = workspace / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def button_source() -> str:
    """Component with two variant constants, a props interface and defaults."""
    return BUTTON_SOURCE


@pytest.fixture
def simple_button_source() -> str:
    return SIMPLE_BUTTON_SOURCE
