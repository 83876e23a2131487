"""
Plugin manifest schema.

A manifest is a YAML document with a small envelope (version, kind, type,
name) and a variant-specific ``spec`` body. The variant is chosen from the
(kind, type) pair through SPEC_VARIANTS; adding a variant means adding a
model and an entry there. Unrecognized pairs parse into UnknownSpec so callers
can reject them explicitly.
"""

from typing import Annotated, Any, Dict, List, Optional, Tuple, Type, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def scalar_to_text(value: Any) -> Any:
    """Render YAML numbers and booleans as text; other values pass through."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


def text_or_empty(value: Any) -> Any:
    """An empty value (YAML null) reads as an empty string."""
    if value is None:
        return ""
    return scalar_to_text(value)


LenientText = Annotated[str, BeforeValidator(text_or_empty)]


class PluginInput(BaseModel):
    """A single input accepted by a plugin."""

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    description: LenientText = ""
    default: Any = None
    required: bool = False
    secret: bool = False


class PluginStep(BaseModel):
    """Spec body of a step plugin (kind: plugin, type: step)."""

    model_config = ConfigDict(extra="allow")

    description: LenientText = ""
    inputs: Dict[str, PluginInput] = Field(default_factory=dict)
    outputs: Dict[str, Any] = Field(default_factory=dict)
    image: Optional[str] = None
    entrypoint: Optional[str] = None
    args: List[str] = Field(default_factory=list)
    run: Optional[Dict[str, Any]] = None


class PluginStage(BaseModel):
    """Spec body of a stage plugin (kind: plugin, type: stage)."""

    model_config = ConfigDict(extra="allow")

    description: LenientText = ""
    inputs: Dict[str, PluginInput] = Field(default_factory=dict)
    steps: List[Dict[str, Any]] = Field(default_factory=list)


class UnknownSpec(BaseModel):
    """Spec body of any manifest kind/type not modeled here."""

    model_config = ConfigDict(extra="allow")


ManifestSpec = Union[PluginStep, PluginStage, UnknownSpec]

SPEC_VARIANTS: Dict[Tuple[str, Optional[str]], Type[BaseModel]] = {
    ("plugin", "step"): PluginStep,
    ("plugin", "stage"): PluginStage,
}


class Manifest(BaseModel):
    """A parsed plugin manifest."""

    version: Optional[str] = None
    kind: str = Field(..., min_length=1)
    type: Optional[str] = None
    name: LenientText = ""
    spec: ManifestSpec = Field(default_factory=UnknownSpec)

    @field_validator("version", "type", mode="before")
    @classmethod
    def coerce_scalars(cls, value: Any) -> Any:
        """Accept unquoted numeric or boolean values where text is expected."""
        return scalar_to_text(value)

    @model_validator(mode="before")
    @classmethod
    def select_spec_variant(cls, data: Any) -> Any:
        """Validate the spec body against the model for (kind, type)."""
        if not isinstance(data, dict):
            return data

        raw_spec = data.get("spec")
        if raw_spec is None:
            raw_spec = {}
        if isinstance(raw_spec, BaseModel):
            return data
        if not isinstance(raw_spec, dict):
            raise ValueError("spec must be a mapping")

        variant = SPEC_VARIANTS.get((data.get("kind"), data.get("type")), UnknownSpec)
        return {**data, "spec": variant.model_validate(raw_spec)}

    @model_validator(mode="after")
    def require_plugin_name(self) -> "Manifest":
        """Plugin manifests are cataloged by name, so it cannot be empty."""
        if self.is_plugin() and not self.name:
            raise ValueError("plugin manifest must declare a name")
        return self

    def is_plugin(self) -> bool:
        """Check whether the spec is one of the recognized plugin variants."""
        return isinstance(self.spec, (PluginStep, PluginStage))
