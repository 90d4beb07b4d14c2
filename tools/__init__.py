"""Tools module for StoryMate."""

from tools.file_filter import should_process_file
from tools.story_generator import (
    GeneratedStory,
    create_companion_file,
    derive_dir_name,
    update_companion_file,
)
from tools.story_models import DefaultVariantEntry, ExtractionResult, TemplateContext, VariantEntry
from tools.template_resolver import DEFAULT_STORY_TEMPLATE, read_story_template
from tools.variant_extractor import extract_for_mode, extract_variant_map, extract_variants

__all__ = [
    "should_process_file",
    "GeneratedStory",
    "create_companion_file",
    "derive_dir_name",
    "update_companion_file",
    "DefaultVariantEntry",
    "ExtractionResult",
    "TemplateContext",
    "VariantEntry",
    "DEFAULT_STORY_TEMPLATE",
    "read_story_template",
    "extract_for_mode",
    "extract_variant_map",
    "extract_variants",
]
