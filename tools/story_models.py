"""Data shapes flowing from the variant extractor into story templates."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VariantEntry(BaseModel):
    """A variant axis found in component source."""

    key: str = Field(description="Lowercased axis name, e.g. 'size'")
    value: str = Field(description="Source of the axis options, e.g. 'BUTTON_SIZE'")


class DefaultVariantEntry(BaseModel):
    """A default selection parsed from a defaultVariants block."""

    key: str
    value: str


class ExtractionResult(BaseModel):
    """Everything the extractor learned about a component file."""

    variants: list[VariantEntry] = Field(default_factory=list)
    default_variants: list[DefaultVariantEntry] = Field(default_factory=list)
    props_interface_name: str | None = Field(default=None, description="Exported '*Props' interface, if any")
    is_interactions_component: bool = Field(default=False, description="Component lives in an interactions group")
    variant_types: dict[str, dict[str, list[str]]] = Field(
        default_factory=dict,
        description="Axis name to {'type': [options]}; only the variant_map mode fills this",
    )


class TemplateContext(BaseModel):
    """Data handed to the story template.

    Field names are exposed to templates in camelCase (``componentName``,
    ``defaultVariants``...), matching the keys user templates are written
    against.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    component_name: str
    variants: list[VariantEntry] = Field(default_factory=list)
    default_variants: list[DefaultVariantEntry] = Field(default_factory=list)
    dir_name: str
    props_interface_name: str | None = None
    is_interactions_component: bool = False
    figma_url: str | None = None
    variant_types: dict[str, dict[str, list[str]]] = Field(default_factory=dict)

    def to_template_data(self) -> dict[str, Any]:
        """Return the camelCase mapping passed to the template engine."""
        return self.model_dump(by_alias=True)
