"""Options for rendering member graphs."""

from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from typeshape.exceptions import ConfigError
from typeshape.user_config import UserConfig


OutputFormat = Literal["both", "text", "json"]


class RenderOptions(BaseModel):
    """Options shared by the outline and document sinks."""

    indent_size: int = Field(2, ge=0, description="Spaces per outline level")
    cycle_marker: bool = Field(
        True, description="Emit '<type> (cycle) <name>' for cyclic members instead of nothing"
    )
    pretty_json: bool = Field(True, description="Indent the structured document")
    output_format: OutputFormat = Field("both", description="Which renderings to produce")

    @classmethod
    def from_config(cls, config: UserConfig, **overrides) -> "RenderOptions":
        """
        Build options from the "render" config section.

        Overrides whose value is None are ignored, so CLI flags left unset fall
        through to the configuration.

        Raises:
            ConfigError: If a configured value is invalid.
        """
        values = dict(config.get("render", {}))
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid render configuration: {e}") from e
