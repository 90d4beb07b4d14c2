"""Unit tests for companion story generation."""

from pathlib import Path

import pytest
from jinja2 import TemplateSyntaxError

from config.story_config import StoryMateConfig
from tools.story_generator import (
    build_template_context,
    companion_path_for,
    create_companion_file,
    derive_dir_name,
    extract_figma_url,
    find_companion_files,
    relative_dir_name,
    render_story,
    update_companion_file,
)
from tools.template_resolver import DEFAULT_STORY_TEMPLATE
from tools.variant_extractor import extract_variants

EXPECTED_BUTTON_STORY = """import type { Meta, StoryObj } from '@storybook/react';

import Button, { BUTTON_SIZE } from './Button';

const meta: Meta<typeof Button> = {
  title: 'Buttons/Button',
  component: Button,
  argTypes: {
    size: {
      options: BUTTON_SIZE,
      control: 'select',
    },
  },
  args: {
    children: 'Default Text',
    size: 'md',
  },
} satisfies Meta<typeof Button>;

export default meta;
type Story = StoryObj<typeof meta>;

export const Basic: Story = {
  parameters: {
    design: {
      type: 'figma',
      url: 'REPLACE_WITH_FIGMA_URL',
      allowFullscreen: true,
    },
  },
};
"""


# =============================================================================
# Naming Tests
# =============================================================================


class TestNaming:
    """Test suite for path and title derivation."""

    def test_companion_path(self):
        path = companion_path_for(Path("/repo/components/buttons/Button.tsx"))

        assert path == Path("/repo/components/buttons/Button.stories.tsx")

    def test_companion_path_strips_last_extension_only(self):
        assert companion_path_for("/repo/Button.test.tsx").name == "Button.test.stories.tsx"

    @pytest.mark.parametrize(
        "file_dir,expected",
        [
            ("/repo/ui/src/components/Buttons", "Buttons"),
            ("/repo/ui/src/components/buttons", "Buttons"),
            ("/repo/ui/src/components/forms/inputs", "Forms"),
            ("/repo/components/forms/components/inputs", "Inputs"),
            ("/repo/src/widgets/cards", "Cards"),
            ("/repo/ui/src/components", "Components"),
        ],
    )
    def test_derive_dir_name(self, file_dir, expected):
        assert derive_dir_name(file_dir) == expected

    @pytest.mark.parametrize(
        "file_path,expected",
        [
            ("/repo/ui/src/components/forms/inputs/TextInput.tsx", "Forms/Inputs"),
            ("/repo/ui/src/components/buttons/Button.tsx", "Buttons"),
            ("/repo/ui/src/components/Button.tsx", "Components"),
            ("/repo/src/widgets/cards/Card.tsx", "Cards"),
        ],
    )
    def test_relative_dir_name(self, file_path, expected):
        assert relative_dir_name(file_path, ["ui/src/components"]) == expected

    def test_relative_dir_name_ignores_malformed_watch_entries(self):
        assert relative_dir_name("/repo/ui/src/components/forms/Text.tsx", [None, "ui/src/components"]) == "Forms"

    @pytest.mark.parametrize("watch_directories", [5, "ui/src/components", None])
    def test_relative_dir_name_non_list_setting(self, watch_directories):
        assert relative_dir_name("/repo/ui/src/components/forms/inputs/Text.tsx", watch_directories) == "Inputs"

    def test_extract_figma_url(self):
        story = "design: {\n      type: 'figma',\n      url: 'https://figma.com/file/abc',\n}"

        assert extract_figma_url(story) == "https://figma.com/file/abc"
        assert extract_figma_url("no design here") == ""


# =============================================================================
# Creation Tests
# =============================================================================


class TestCreateCompanionFile:
    """Test suite for create_companion_file."""

    def test_end_to_end_button(self, workspace, make_component):
        """Test the generated story for a simple button component."""
        component = make_component("ui/src/components/buttons/Button.tsx")

        story = create_companion_file(component, StoryMateConfig(), workspace)

        expected_path = workspace / "ui/src/components/buttons/Button.stories.tsx"
        assert story.path == expected_path
        assert story.written is True
        assert story.component_name == "Button"
        assert expected_path.read_text(encoding="utf-8") == EXPECTED_BUTTON_STORY

    def test_full_component(self, workspace, make_component, button_source):
        component = make_component("ui/src/components/buttons/Button.tsx", button_source)

        code = create_companion_file(component, StoryMateConfig(), workspace).code

        assert "import type { ButtonProps } from './Button';\n" in code
        assert "import Button, { BUTTON_SIZE, BUTTON_VARIANT } from './Button';\n" in code
        assert "const meta: Meta<ButtonProps> = {" in code
        assert code.index("    size: {") < code.index("    variant: {")
        assert "    variant: 'primary',\n" in code

    def test_rerun_is_byte_identical(self, workspace, make_component, button_source):
        component = make_component("ui/src/components/buttons/Button.tsx", button_source)
        story_path = companion_path_for(component)

        create_companion_file(component, StoryMateConfig(), workspace)
        first = story_path.read_bytes()
        create_companion_file(component, StoryMateConfig(), workspace)

        assert story_path.read_bytes() == first

    def test_overwrites_existing_story(self, workspace, make_component):
        component = make_component("ui/src/components/buttons/Button.tsx")
        companion_path_for(component).write_text("hand written", encoding="utf-8")

        create_companion_file(component, StoryMateConfig(), workspace)

        assert companion_path_for(component).read_text(encoding="utf-8") == EXPECTED_BUTTON_STORY

    def test_missing_template_matches_default(self, workspace, make_component, button_source):
        """Test that an unreadable template renders exactly like the built-in one."""
        component = make_component("ui/src/components/buttons/Button.tsx", button_source)
        config = StoryMateConfig(template_path="does/not/exist.j2")

        code = create_companion_file(component, config, workspace).code

        extraction = extract_variants(button_source, str(component.parent))
        context = build_template_context(component, extraction, "Buttons")
        assert code == render_story(DEFAULT_STORY_TEMPLATE, context)

    def test_workspace_template(self, workspace, make_component):
        (workspace / "story.j2").write_text(
            "{{ dirName }}/{{ componentName }}:{% for v in variants %} {{ v.key }}={{ v.value }}{% endfor %}\n",
            encoding="utf-8",
        )
        component = make_component("ui/src/components/buttons/Button.tsx")

        create_companion_file(component, StoryMateConfig(template_path="story.j2"), workspace)

        assert companion_path_for(component).read_text(encoding="utf-8") == "Buttons/Button: size=BUTTON_SIZE\n"

    def test_variant_map_mode(self, workspace, make_component, button_source):
        (workspace / "story.j2").write_text(
            "{% for name, axis in variantTypes.items() %}{{ name }}={{ axis.type | join('|') }};{% endfor %}",
            encoding="utf-8",
        )
        component = make_component("ui/src/components/buttons/Button.tsx", button_source)
        config = StoryMateConfig(template_path="story.j2", extraction_mode="variant_map")

        code = create_companion_file(component, config, workspace).code

        assert code == "size=sm|md|lg;variant=primary|secondary;"

    def test_dry_run_does_not_write(self, workspace, make_component):
        component = make_component("ui/src/components/buttons/Button.tsx")

        story = create_companion_file(component, StoryMateConfig(), workspace, dry_run=True)

        assert story.written is False
        assert story.code == EXPECTED_BUTTON_STORY
        assert not companion_path_for(component).exists()

    def test_missing_component_raises(self, workspace):
        with pytest.raises(FileNotFoundError):
            create_companion_file(workspace / "components/Missing.tsx", StoryMateConfig(), workspace)

        assert not (workspace / "components/Missing.stories.tsx").exists()

    def test_undecodable_bytes_still_generate(self, workspace):
        """Test that a component with invalid UTF-8 still gets a story."""
        component = workspace / "ui/src/components/buttons/Button.tsx"
        component.parent.mkdir(parents=True)
        component.write_bytes(b"// caf\xe9\nexport const BUTTON_SIZE: string[] = ['sm'];\n")

        story = create_companion_file(component, StoryMateConfig(), workspace)

        assert story.written is True
        assert "import Button, { BUTTON_SIZE } from './Button';\n" in story.code

    def test_render_error_leaves_no_file(self, workspace, make_component):
        (workspace / "broken.j2").write_text("{% for v in variants %}", encoding="utf-8")
        component = make_component("ui/src/components/buttons/Button.tsx")

        with pytest.raises(TemplateSyntaxError):
            create_companion_file(component, StoryMateConfig(template_path="broken.j2"), workspace)

        assert not companion_path_for(component).exists()


# =============================================================================
# Update Tests
# =============================================================================


class TestUpdateCompanionFile:
    """Test suite for update-on-save support."""

    def test_find_companion_files(self, make_component):
        component = make_component("ui/src/components/buttons/Button.tsx")
        assert find_companion_files(component) == []

        companion_path_for(component).write_text("story", encoding="utf-8")

        assert find_companion_files(component) == [companion_path_for(component)]

    def test_update_keeps_figma_url(self, workspace, make_component, button_source):
        component = make_component("ui/src/components/forms/inputs/Button.tsx")
        config = StoryMateConfig()
        create_companion_file(component, config, workspace)
        companion = companion_path_for(component)
        companion.write_text(
            companion.read_text(encoding="utf-8").replace("REPLACE_WITH_FIGMA_URL", "https://figma.com/file/xyz"),
            encoding="utf-8",
        )
        component.write_text(button_source, encoding="utf-8")

        story = update_companion_file(component, companion, config, workspace)

        code = companion.read_text(encoding="utf-8")
        assert story.written is True
        assert "url: 'https://figma.com/file/xyz'," in code
        assert "title: 'Forms/Inputs/Button'," in code
        assert "options: BUTTON_VARIANT," in code

    def test_update_without_figma_url_uses_placeholder(self, workspace, make_component):
        component = make_component("ui/src/components/buttons/Button.tsx")
        companion = companion_path_for(component)
        companion.write_text("// old story\n", encoding="utf-8")

        update_companion_file(component, companion, StoryMateConfig(), workspace)

        assert companion.read_text(encoding="utf-8") == EXPECTED_BUTTON_STORY
