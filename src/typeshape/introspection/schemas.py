"""Options for building member graphs from Python types."""

from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from typeshape.exceptions import ConfigError
from typeshape.user_config import UserConfig


class BuildOptions(BaseModel):
    """Options controlling how far and what the builder expands."""

    max_depth: Optional[int] = Field(
        10, ge=0, description="Do not expand member types below this depth (None = unlimited)"
    )
    include_private: bool = Field(False, description="Include members whose name starts with '_'")
    include_properties: bool = Field(True, description="Include annotated properties")

    @classmethod
    def from_config(cls, config: UserConfig, **overrides) -> "BuildOptions":
        """
        Build options from the "build" config section.

        Raises:
            ConfigError: If a configured value is invalid.
        """
        values = dict(config.get("build", {}))
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid build configuration: {e}") from e
