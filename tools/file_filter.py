"""Eligibility check for companion story generation."""

from pathlib import Path, PurePath

from config.story_config import StoryMateConfig

STORIES_MARKER = ".stories."


def _as_posix(file_path: str | PurePath) -> str:
    if isinstance(file_path, PurePath):
        return file_path.as_posix()
    return Path(file_path).as_posix()


def string_entries(value) -> list[str]:
    """Return the string items of a list setting.

    Anything other than a list or tuple yields nothing, so a bare string or
    number in the settings file never matches.
    """
    if not isinstance(value, (list, tuple)):
        return []
    return [entry for entry in value if isinstance(entry, str)]


def should_process_file(file_path: str | PurePath, config: StoryMateConfig) -> bool:
    """Return True if the file should get a companion story.

    Matching is plain substring matching on the path: a watch entry of
    ``components`` accepts any path containing that text anywhere.
    Story files themselves are always rejected.
    """
    path = _as_posix(file_path)

    if STORIES_MARKER in path:
        return False

    in_watched_dir = any(watch in path for watch in string_entries(config.watch_directories))
    has_extension = any(path.endswith(ext) for ext in string_entries(config.file_extensions))

    return in_watched_dir and has_extension
