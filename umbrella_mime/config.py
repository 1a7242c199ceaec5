"""Library configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden with an
``UMBRELLA_MIME_`` prefixed env var.
"""

from __future__ import annotations

import codecs

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class MimeConfig(BaseSettings):
    """Parsing and logging settings."""

    model_config = {"env_prefix": "UMBRELLA_MIME_"}

    default_charset: str = Field(
        default="us-ascii",
        description="Charset assumed for parts that declare none or an unknown one",
    )
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(
        default=True,
        description="Emit JSON log lines instead of the console renderer",
    )

    @field_validator("default_charset")
    @classmethod
    def _known_charset(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown charset: {value}") from exc
        return value
