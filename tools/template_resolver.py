"""Story template loading and rendering."""

import logging
import re
from pathlib import Path
from typing import Any

from jinja2.sandbox import SandboxedEnvironment

from config.story_config import StoryMateConfig

logger = logging.getLogger(__name__)

# A line holding nothing but one block tag
STANDALONE_TAG_PATTERN = re.compile(r"^[ \t]*(\{%(?:(?!%\}).)*%\})[ \t]*\r?\n", re.MULTILINE)

DEFAULT_STORY_TEMPLATE = """import type { Meta, StoryObj } from '@storybook/react';

{% if propsInterfaceName %}
import type { {{ propsInterfaceName }} } from './{{ componentName }}';
{% endif %}
import {{ componentName }}{% if variants %}, { {% for variant in variants %}{{ variant.value }}{% if not loop.last %}, {% endif %}{% endfor %} }{% endif %} from './{{ componentName }}';

const meta: {% if propsInterfaceName %}Meta<{{ propsInterfaceName }}>{% else %}Meta<typeof {{ componentName }}>{% endif %} = {
  title: '{{ dirName }}/{{ componentName }}',
  component: {{ componentName }},
  argTypes: {
    {% for variant in variants %}
    {{ variant.key }}: {
      options: {{ variant.value }},
      control: 'select',
    },
    {% endfor %}
    {% if isInteractionsComponent %}
    onPress: { action: 'Pressed' },
    {% endif %}
  },
  args: {
    children: 'Default Text',
    {% for entry in defaultVariants %}
    {{ entry.key }}: '{{ entry.value }}',
    {% endfor %}
  },
} satisfies {% if propsInterfaceName %}Meta<{{ propsInterfaceName }}>{% else %}Meta<typeof {{ componentName }}>{% endif %};

export default meta;
type Story = StoryObj<typeof meta>;

export const Basic: Story = {
  parameters: {
    design: {
      type: 'figma',
      url: '{% if figmaUrl %}{{ figmaUrl }}{% else %}REPLACE_WITH_FIGMA_URL{% endif %}',
      allowFullscreen: true,
    },
  },
};
"""


def create_environment() -> SandboxedEnvironment:
    """Create the Jinja2 environment used for story templates."""
    return SandboxedEnvironment(
        keep_trailing_newline=True,
        autoescape=False,
    )


def read_story_template(config: StoryMateConfig, workspace_root: Path) -> str:
    """Return the workspace template, or the built-in one if it can't be read.

    Read failures of any kind fall back silently to the default template.
    """
    try:
        template_path = Path(workspace_root) / config.template_path
        content = template_path.read_text(encoding="utf-8")
    except Exception as e:
        logger.debug(f"[TEMPLATE] Using default template ({config.template_path!r}: {e})")
        return DEFAULT_STORY_TEMPLATE

    logger.debug(f"[TEMPLATE] Loaded template from {template_path}")
    return content


def strip_standalone_tags(template_source: str) -> str:
    """Drop the indentation and line break around block tags that sit alone on a line.

    Block tags sharing a line with other text keep the whitespace around them.
    """
    return STANDALONE_TAG_PATTERN.sub(r"\1", template_source)


def render_template(template_source: str, data: dict[str, Any]) -> str:
    """Render a story template against a camelCase context mapping."""
    env = create_environment()
    return env.from_string(strip_standalone_tags(template_source)).render(**data)
