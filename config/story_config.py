"""Workspace-level StoryMate configuration.

The ``storyMate`` section of the workspace settings file decides which
files get a companion story and how it is rendered. Values are read
through a provider so the storage behind them can be swapped (YAML file,
in-memory mapping) without touching the pipeline.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import yaml

logger = logging.getLogger(__name__)

CONFIG_SECTION = "storyMate"

DEFAULT_WATCH_DIRECTORIES = ["ui/src/components"]
DEFAULT_TEMPLATE_PATH = ""
DEFAULT_FILE_EXTENSIONS = [".tsx"]
DEFAULT_EXTRACTION_MODE = "constants"


@dataclass(frozen=True)
class StoryMateConfig:
    """Resolved storyMate configuration.

    Values are taken as-is from the provider; a malformed entry (say, a
    non-string extension) is kept and simply never matches.
    """

    watch_directories: list[Any] = field(default_factory=lambda: list(DEFAULT_WATCH_DIRECTORIES))
    template_path: str = DEFAULT_TEMPLATE_PATH
    file_extensions: list[Any] = field(default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS))
    update_on_save: bool = False
    extraction_mode: str = DEFAULT_EXTRACTION_MODE


class ConfigProvider(Protocol):
    """Read-only access to storyMate configuration keys."""

    def get(self, key: str) -> Any | None: ...


class MappingConfigProvider:
    """Provider backed by an in-memory mapping."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = dict(values or {})

    def get(self, key: str) -> Any | None:
        return self._values.get(key)


class YamlConfigProvider:
    """Provider reading the ``storyMate`` section of a YAML settings file.

    The file is read on every lookup batch so edits take effect without
    restarting the watcher. A missing or broken file behaves like an
    empty store.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load_section(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.debug(f"[CONFIG] No settings file at {self.path}, using defaults")
            return {}

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"[CONFIG] Failed to read {self.path}: {e}")
            return {}

        section = data.get(CONFIG_SECTION) if isinstance(data, dict) else None
        return section if isinstance(section, dict) else {}

    def get(self, key: str) -> Any | None:
        return self._load_section().get(key)

    def snapshot(self) -> MappingConfigProvider:
        """Read the file once and return a provider over its contents."""
        return MappingConfigProvider(self._load_section())


def resolve_config(provider: ConfigProvider) -> StoryMateConfig:
    """Build a StoryMateConfig, substituting defaults for absent values."""
    if isinstance(provider, YamlConfigProvider):
        provider = provider.snapshot()

    return StoryMateConfig(
        watch_directories=provider.get("watchDirectories") or list(DEFAULT_WATCH_DIRECTORIES),
        template_path=provider.get("templatePath") or DEFAULT_TEMPLATE_PATH,
        file_extensions=provider.get("fileExtensions") or list(DEFAULT_FILE_EXTENSIONS),
        update_on_save=bool(provider.get("updateOnSave") or False),
        extraction_mode=provider.get("extractionMode") or DEFAULT_EXTRACTION_MODE,
    )
