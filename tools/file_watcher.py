"""Workspace file watcher.

A watchdog observer thread forwards file events onto the asyncio loop;
a single long-lived task collects them into batches and hands each batch
to the story handler, one file after another.
"""

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from handlers.story_handler import EventKind, StoryHandler

logger = logging.getLogger(__name__)

QUEUE_POLL_SECONDS = 0.5

FileEvent = tuple[EventKind, str]


class EventForwarder(FileSystemEventHandler):
    """Pushes file events from the observer thread onto an asyncio queue."""

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
        self._loop = loop
        self._queue = queue

    def _forward(self, kind: EventKind, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        path = os.fsdecode(event.src_path)
        self._loop.call_soon_threadsafe(self._queue.put_nowait, (kind, path))

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(EventKind.CREATED, event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._forward(EventKind.SAVED, event)


def split_batch(events: list[FileEvent]) -> tuple[list[str], list[str]]:
    """Split a batch into created and saved paths, dropping repeats.

    A file created within the batch is not also treated as saved.
    """
    created: list[str] = []
    saved: list[str] = []
    for kind, path in events:
        if kind == EventKind.CREATED and path not in created:
            created.append(path)
            if path in saved:
                saved.remove(path)
        elif kind == EventKind.SAVED and path not in created and path not in saved:
            saved.append(path)
    return created, saved


class StoryWatcher:
    """Watches a workspace and generates stories for new components."""

    def __init__(
        self,
        handler: StoryHandler,
        root: Path,
        debounce_seconds: float = 0.2,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        self.handler = handler
        self.root = Path(root)
        self.debounce_seconds = debounce_seconds
        self._observer_factory = observer_factory

    async def _next_batch(self, queue: asyncio.Queue, stop: asyncio.Event) -> list[FileEvent]:
        """Wait for the first event, then gather whatever arrives shortly after."""
        while not stop.is_set():
            try:
                first = await asyncio.wait_for(queue.get(), timeout=QUEUE_POLL_SECONDS)
            except TimeoutError:
                continue

            await asyncio.sleep(self.debounce_seconds)
            batch = [first]
            while not queue.empty():
                batch.append(queue.get_nowait())
            return batch
        return []

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Watch until ``stop`` is set or the task is cancelled."""
        stop = stop or asyncio.Event()
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        observer = self._observer_factory()
        observer.schedule(EventForwarder(loop, queue), str(self.root), recursive=True)
        observer.start()
        logger.info(f"[WATCH] Watching {self.root}")

        try:
            while not stop.is_set():
                batch = await self._next_batch(queue, stop)
                if not batch:
                    continue

                created, saved = split_batch(batch)
                logger.debug(f"[WATCH] Batch: {len(created)} created, {len(saved)} saved")

                if created:
                    result = await self.handler.run(files=created, kind=EventKind.CREATED)
                    for path in result.files_written:
                        logger.info(f"[WATCH] Story ready: {path}")
                if saved:
                    await self.handler.run(files=saved, kind=EventKind.SAVED)
        finally:
            observer.stop()
            observer.join()
            logger.info("[WATCH] Stopped watching")
