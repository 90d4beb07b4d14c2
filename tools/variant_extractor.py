"""Variant extraction from component source text.

A lexical, best-effort scan: nothing here parses TypeScript. Patterns
that do not match (unterminated braces, unusual formatting) just yield
empty results instead of errors.

Two strategies are available:

- ``constants`` (default): every ``export const PREFIX_SUFFIX:`` becomes a
  variant keyed by the lowercased suffix, e.g. ``BUTTON_SIZE`` -> ``size``.
- ``variant_map``: reads the ``variants: { axis: {...} }`` object literal
  and looks up an exported all-caps array constant for each axis.
"""

import locale
import logging
import re

from tools.story_models import DefaultVariantEntry, ExtractionResult, VariantEntry

logger = logging.getLogger(__name__)

EXTRACTION_MODES = ("constants", "variant_map")

VARIANT_CONST_PATTERN = re.compile(r"^export const ((?:[A-Z][A-Z0-9]*_)+([A-Z][A-Z0-9]*))\s*:", re.MULTILINE)
DEFAULT_VARIANTS_PATTERN = re.compile(r"defaultVariants:\s*\{([^}]+)\}")
PROPS_INTERFACE_PATTERN = re.compile(r"export interface (\w+Props)\s*\{([^}]+)\}")
QUOTES_PATTERN = re.compile(r"['\"]")

VARIANTS_BLOCK_PATTERN = re.compile(r"\bvariants:\s*\{")
VARIANT_AXIS_PATTERN = re.compile(r"(\w+)\s*:\s*\{([^{}]*)\}")
OBJECT_KEY_PATTERN = re.compile(r"(?:^|,)\s*(\w+|'[^']*'|\"[^\"]*\")\s*:")
STRING_ITEM_PATTERN = re.compile(r"['\"]([^'\"]*)['\"]")

INTERACTIONS_MARKER = "interactions"


def extract_variants(source_text: str, dir_path: str = "") -> ExtractionResult:
    """Scan component source for variant constants.

    Args:
        source_text: Full text of the component file
        dir_path: Directory containing the component, used for the
            interactions category flag

    Returns:
        ExtractionResult with variants sorted by key
    """
    variants = []
    for match in VARIANT_CONST_PATTERN.finditer(source_text):
        variants.append(VariantEntry(key=match.group(2).lower(), value=match.group(1)))

    # sorted() is stable, so duplicate keys keep declaration order
    variants = sorted(variants, key=lambda v: locale.strxfrm(v.key))

    result = ExtractionResult(
        variants=variants,
        default_variants=parse_default_variants(source_text),
        props_interface_name=find_props_interface(source_text),
        is_interactions_component=INTERACTIONS_MARKER in (dir_path or "").lower(),
    )
    logger.debug(
        f"[EXTRACT] {len(result.variants)} variants, {len(result.default_variants)} defaults, "
        f"props={result.props_interface_name}"
    )
    return result


def parse_default_variants(source_text: str) -> list[DefaultVariantEntry]:
    """Parse the first ``defaultVariants: { ... }`` block.

    Nested braces are not supported; the block ends at the first ``}``.
    """
    match = DEFAULT_VARIANTS_PATTERN.search(source_text)
    if not match:
        return []

    entries = []
    for pair in match.group(1).split(","):
        pair = pair.strip()
        if not pair:
            continue
        key, sep, value = pair.partition(":")
        if not sep:
            continue
        entries.append(DefaultVariantEntry(key=key.strip(), value=QUOTES_PATTERN.sub("", value.strip())))
    return entries


def find_props_interface(source_text: str) -> str | None:
    """Return the name of the first exported ``*Props`` interface."""
    match = PROPS_INTERFACE_PATTERN.search(source_text)
    return match.group(1) if match else None


def _block_body(text: str, open_index: int) -> str | None:
    """Return the text inside the brace opened at ``open_index``.

    Returns None when the brace is never closed.
    """
    depth = 0
    for i in range(open_index, len(text)):
        char = text[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[open_index + 1 : i]
    return None


def _find_options_constant(source_text: str, axis: str) -> tuple[str, list[str]] | None:
    """Find an exported array constant holding the options of ``axis``.

    ``size`` matches ``BUTTON_SIZE``, ``SIZES`` or ``SIZE``.
    """
    pattern = re.compile(
        rf"^export const ([A-Z0-9_]*{re.escape(axis.upper())}S?)\s*(?::[^=\n]*)?=\s*\[([^\]]*)\]",
        re.MULTILINE,
    )
    match = pattern.search(source_text)
    if not match:
        return None
    return match.group(1), STRING_ITEM_PATTERN.findall(match.group(2))


def extract_variant_map(source_text: str, dir_path: str = "") -> ExtractionResult:
    """Scan the ``variants`` object literal of a component (legacy mode).

    Variants keep their declaration order. The interactions flag comes
    from the source text rather than the directory path.
    """
    variants = []
    variant_types = {}

    block_match = VARIANTS_BLOCK_PATTERN.search(source_text)
    body = _block_body(source_text, block_match.end() - 1) if block_match else None

    for axis_match in VARIANT_AXIS_PATTERN.finditer(body or ""):
        axis = axis_match.group(1)
        constant = _find_options_constant(source_text, axis)

        if constant:
            name, options = constant
            value = name
        else:
            options = [QUOTES_PATTERN.sub("", key) for key in OBJECT_KEY_PATTERN.findall(axis_match.group(2))]
            value = "[" + ", ".join(f"'{option}'" for option in options) + "]"

        variants.append(VariantEntry(key=axis, value=value))
        variant_types[axis] = {"type": options}

    if body is None:
        logger.debug("[EXTRACT] No variants object literal found")

    return ExtractionResult(
        variants=variants,
        default_variants=parse_default_variants(source_text),
        props_interface_name=find_props_interface(source_text),
        is_interactions_component=INTERACTIONS_MARKER in source_text.lower(),
        variant_types=variant_types,
    )


def extract_for_mode(source_text: str, dir_path: str = "", mode: str = "constants") -> ExtractionResult:
    """Run the extraction strategy named by ``mode``.

    Unknown modes use the ``constants`` strategy.
    """
    if mode == "variant_map":
        return extract_variant_map(source_text, dir_path)
    if mode not in EXTRACTION_MODES:
        logger.warning(f"[EXTRACT] Unknown extraction mode '{mode}', using 'constants'")
    return extract_variants(source_text, dir_path)
