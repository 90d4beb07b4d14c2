"""Story Handler - turns batches of file events into companion story files.

Each batch re-reads the workspace configuration, then walks the files in
order. A failure on one file is reported and recorded, and the batch
moves on to the next file.
"""

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from config.settings import Settings
from config.story_config import ConfigProvider, StoryMateConfig, YamlConfigProvider, resolve_config
from handlers.base_handler import BaseHandler, HandlerResult
from tools.file_filter import should_process_file
from tools.notifier import ConsoleNotifier, NoOpNotifier, get_notifier
from tools.story_generator import create_companion_file, find_companion_files, update_companion_file


class EventKind(str, Enum):
    """Kinds of file events the handler reacts to."""

    CREATED = "created"
    SAVED = "saved"


class StoryHandler(BaseHandler):
    """Creates or refreshes companion story files for component files."""

    name = "story_handler"
    description = "Generates Storybook companion files for new components"

    def __init__(
        self,
        settings: Settings | None = None,
        config_provider: ConfigProvider | None = None,
        notifier: ConsoleNotifier | NoOpNotifier | None = None,
    ):
        super().__init__(settings=settings)
        self.config_provider = config_provider or YamlConfigProvider(self.settings.settings_path)
        self.notifier = notifier or get_notifier()

    def load_config(self) -> StoryMateConfig:
        """Resolve the storyMate configuration for this batch."""
        return resolve_config(self.config_provider)

    async def run(
        self,
        files: Sequence[str | Path] = (),
        kind: EventKind = EventKind.CREATED,
        force: bool = False,
    ) -> HandlerResult:
        """Process a batch of created or saved files.

        Args:
            files: Paths from one event batch, processed in order
            kind: Whether the files were just created or saved
            force: Skip the file filter (explicit CLI invocations)

        Returns:
            HandlerResult listing written files and per-file errors
        """
        started_at = datetime.now(UTC)
        config = self.load_config()

        if kind == EventKind.SAVED and not config.update_on_save and not force:
            self.log("Update on save is disabled, ignoring saved files", level="debug")
            return self.create_result(
                success=True,
                message="Update on save is disabled",
                files_skipped=[str(f) for f in files],
                started_at=started_at,
            )

        written: list[str] = []
        skipped: list[str] = []
        errors: list[str] = []

        for file in files:
            file_path = Path(file)
            try:
                if not force and not should_process_file(file_path, config):
                    skipped.append(str(file_path))
                    continue

                if kind == EventKind.CREATED:
                    written.extend(await self._create(file_path, config))
                else:
                    written.extend(await self._update(file_path, config))
            except Exception as e:
                action = "create" if kind == EventKind.CREATED else "update"
                self.notifier.warn(f"Failed to {action} companion file - {e}")
                self.log(f"Failed to {action} companion file for {file_path}: {e}", level="error")
                errors.append(f"{file_path}: {e}")

        processed = len(written) + len(errors)
        return self.create_result(
            success=not errors,
            message=f"Processed {processed} file(s): {len(written)} written, {len(errors)} failed",
            files_written=written,
            files_skipped=skipped,
            errors=errors,
            metadata={"kind": kind.value, "dry_run": self.settings.dry_run},
            started_at=started_at,
        )

    async def _create(self, file_path: Path, config: StoryMateConfig) -> list[str]:
        story = await asyncio.to_thread(
            create_companion_file,
            file_path,
            config,
            self.settings.workspace_root,
            self.settings.dry_run,
        )
        self.log(f"Created {story.path} for {story.component_name}")
        return [str(story.path)]

    async def _update(self, file_path: Path, config: StoryMateConfig) -> list[str]:
        updated = []
        for companion in await asyncio.to_thread(find_companion_files, file_path):
            story = await asyncio.to_thread(
                update_companion_file,
                file_path,
                companion,
                config,
                self.settings.workspace_root,
                self.settings.dry_run,
            )
            self.log(f"Updated {story.path}")
            updated.append(str(story.path))
        return updated


def create_story_handler(
    settings: Settings | None = None,
    config_provider: ConfigProvider | None = None,
    notifier: ConsoleNotifier | NoOpNotifier | None = None,
) -> StoryHandler:
    """Factory function to create a story handler."""
    return StoryHandler(settings=settings, config_provider=config_provider, notifier=notifier)
