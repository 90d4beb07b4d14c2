"""Companion story generation for component files.

Turns ``Button.tsx`` into ``Button.stories.tsx`` next to it: extract the
variants, pick the template, render, write. Rendering always completes
before anything touches the disk, so a failure leaves no partial file.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from config.story_config import StoryMateConfig
from tools.file_filter import string_entries
from tools.story_models import ExtractionResult, TemplateContext
from tools.template_resolver import read_story_template, render_template
from tools.variant_extractor import extract_for_mode

logger = logging.getLogger(__name__)

COMPANION_SUFFIX = ".stories.tsx"
COMPONENTS_SEGMENT = "components"
FIGMA_URL_PATTERN = re.compile(r"type:\s*'figma',\s*url:\s*'([^']+)'")


@dataclass
class GeneratedStory:
    path: Path
    code: str = ""
    component_name: str = ""
    written: bool = False


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def companion_path_for(original_path: str | Path) -> Path:
    """Return ``<dir>/<componentName>.stories.tsx`` for a component file."""
    original_path = Path(original_path)
    return original_path.parent / f"{original_path.stem}{COMPANION_SUFFIX}"


def derive_dir_name(file_dir: str | Path) -> str:
    """Derive the story group from the component's directory.

    Uses the segment right after the last ``components`` segment, else the
    directory's own name, with the first character upper-cased:
    ``src/components/buttons`` -> ``Buttons``.
    """
    parts = list(Path(file_dir).parts)
    name = parts[-1] if parts else ""

    if COMPONENTS_SEGMENT in parts:
        index = len(parts) - 1 - parts[::-1].index(COMPONENTS_SEGMENT)
        if index + 1 < len(parts) and parts[index + 1]:
            name = parts[index + 1]

    return _capitalize(name)


def relative_dir_name(file_path: str | Path, watch_directories: list[Any]) -> str:
    """Derive a nested story group from the path below the watch directory.

    ``ui/src/components/forms/inputs/Text.tsx`` watched through
    ``ui/src/components`` gives ``Forms/Inputs``. Falls back to the
    capitalized parent directory name.
    """
    directory = Path(file_path).parent

    for watch in string_entries(watch_directories):
        if not watch or watch not in directory.as_posix():
            continue
        rest = directory.as_posix().split(watch, 1)[1]
        segments = [segment for segment in rest.split("/") if segment]
        if segments:
            return "/".join(_capitalize(segment) for segment in segments)
        break

    return _capitalize(directory.name)


def extract_figma_url(companion_text: str) -> str:
    """Return the figma design url of an existing story, or ``""``."""
    match = FIGMA_URL_PATTERN.search(companion_text)
    return match.group(1) if match else ""


def find_companion_files(original_path: str | Path) -> list[Path]:
    """Return the existing story file of a component, if there is one."""
    companion = companion_path_for(original_path)
    return [companion] if companion.is_file() else []


def build_template_context(
    original_path: str | Path,
    extraction: ExtractionResult,
    dir_name: str,
    figma_url: str | None = None,
) -> TemplateContext:
    """Combine extraction output and derived names into a template context."""
    return TemplateContext(
        component_name=Path(original_path).stem,
        variants=extraction.variants,
        default_variants=extraction.default_variants,
        dir_name=dir_name,
        props_interface_name=extraction.props_interface_name,
        is_interactions_component=extraction.is_interactions_component,
        figma_url=figma_url,
        variant_types=extraction.variant_types,
    )


def render_story(template_source: str, context: TemplateContext) -> str:
    """Render a story template for the given context."""
    return render_template(template_source, context.to_template_data())


def _extract(original_path: Path, config: StoryMateConfig) -> ExtractionResult:
    source_text = original_path.read_text(encoding="utf-8", errors="replace")
    return extract_for_mode(source_text, str(original_path.parent), config.extraction_mode)


def _write_story(companion_path: Path, code: str, component_name: str, dry_run: bool) -> GeneratedStory:
    if dry_run:
        logger.info(f"[WRITE] Dry run, not writing {companion_path}")
        return GeneratedStory(path=companion_path, code=code, component_name=component_name)

    companion_path.write_text(code, encoding="utf-8")
    logger.info(f"[WRITE] Wrote {companion_path}")
    return GeneratedStory(path=companion_path, code=code, component_name=component_name, written=True)


def create_companion_file(
    original_path: str | Path,
    config: StoryMateConfig,
    workspace_root: Path,
    dry_run: bool = False,
) -> GeneratedStory:
    """Generate the story file for a newly created component.

    An existing story file at the target path is overwritten.
    """
    original_path = Path(original_path)

    extraction = _extract(original_path, config)
    template_source = read_story_template(config, workspace_root)
    context = build_template_context(original_path, extraction, derive_dir_name(original_path.parent))
    code = render_story(template_source, context)

    return _write_story(companion_path_for(original_path), code, context.component_name, dry_run)


def update_companion_file(
    original_path: str | Path,
    companion_path: str | Path,
    config: StoryMateConfig,
    workspace_root: Path,
    dry_run: bool = False,
) -> GeneratedStory:
    """Regenerate an existing story after its component changed.

    The figma url already filled into the story is carried over, and the
    story group follows the directory layout below the watch directory.
    """
    original_path = Path(original_path)
    companion_path = Path(companion_path)

    figma_url = extract_figma_url(companion_path.read_text(encoding="utf-8", errors="replace"))
    extraction = _extract(original_path, config)
    template_source = read_story_template(config, workspace_root)
    context = build_template_context(
        original_path,
        extraction,
        relative_dir_name(original_path, config.watch_directories),
        figma_url=figma_url or None,
    )
    code = render_story(template_source, context)

    return _write_story(companion_path, code, context.component_name, dry_run)
