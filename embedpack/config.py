"""
Encoder configuration for embedpack.

Options flow from the CLI (or a caller) into the encoder as one validated,
immutable object.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MIN_GZIP_SPACE_SAVINGS = 5.0


class EncoderOptions(BaseModel):
    """
    Generation options for one encoder run.

    Attributes:
        tags: Build tags written verbatim into the generated header
        gzip: Consider gzip compression for each file
        min_gzip_space_savings: Minimal size reduction, in percent of the
            original size, required to store a file compressed
    """

    model_config = ConfigDict(frozen=True)

    tags: tuple[str, ...] = ()
    gzip: bool = False
    min_gzip_space_savings: float = Field(default=DEFAULT_MIN_GZIP_SPACE_SAVINGS, ge=0)

    @field_validator("tags", mode="before")
    @classmethod
    def _drop_empty_tags(cls, value: object) -> object:
        # "--tags ''" splits into [""], which means no tags at all
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return tuple(str(tag) for tag in value if tag != "")
        return value


def get_encoder_options(
    tags: list[str] | tuple[str, ...] | str | None = None,
    gzip: bool = False,
    min_gzip_space_savings: float | None = None,
) -> EncoderOptions:
    """
    Create encoder options with sensible defaults.

    Args:
        tags: Build tags (list or comma-delimited string)
        gzip: Enable compression consideration
        min_gzip_space_savings: Override the savings threshold

    Returns:
        Validated EncoderOptions instance

    Raises:
        pydantic.ValidationError: If a value is out of range
    """
    values: dict[str, object] = {"gzip": gzip}
    if tags is not None:
        values["tags"] = tags
    if min_gzip_space_savings is not None:
        values["min_gzip_space_savings"] = min_gzip_space_savings
    return EncoderOptions(**values)


# Global options instance (can be set by CLI)
_global_options: EncoderOptions | None = None


def set_global_options(options: EncoderOptions) -> None:
    """Set the global encoder options."""
    global _global_options
    _global_options = options


def get_global_options() -> EncoderOptions:
    """Get the global encoder options, creating defaults if needed."""
    global _global_options
    if _global_options is None:
        _global_options = EncoderOptions()
    return _global_options
