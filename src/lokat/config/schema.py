"""
Pydantic models for lokat configuration.

Defines all configuration schemas using Pydantic v2 for validation,
defaults, and serialization.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class GenConfig(BaseModel):
    """Keyspace generation inputs (the `gen` / `check` commands)."""

    input_dir: Path = Path("./locales")
    output_dir: Path = Path("./i18n/generated")
    locales: list[str] = Field(
        default_factory=lambda: ["en"],
        description="Locale codes to load, in output order",
    )
    ref_locale: str | None = Field(
        default=None,
        description="Reference locale for key order. Defaults to the first locale.",
    )

    model_config = {"extra": "forbid"}

    @field_validator("locales", mode="before")
    @classmethod
    def _split_locales(cls, value: object) -> object:
        """Accept "en, id" as well as ["en", "id"]."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @model_validator(mode="after")
    def _default_ref(self) -> "GenConfig":
        if self.ref_locale is None and self.locales:
            self.ref_locale = self.locales[0]
        return self


class RuntimeConfig(BaseModel):
    """Defaults for runtime switchers and the HTTP loader."""

    disable_cache: bool = Field(
        default=False,
        description="Diagnostics only: every load runs the loader. Never enable in production.",
    )
    key_strategy: Literal["value", "identity"] = "value"
    http_timeout: float = Field(default=10.0, gt=0)
    http_retries: int = Field(default=0, ge=0, le=10)

    model_config = {"extra": "forbid"}

    def switcher_kwargs(self) -> dict[str, object]:
        """Keyword arguments for keyed_switcher() / indexed_switcher()."""
        return {"disable_cache": self.disable_cache, "key_strategy": self.key_strategy}

    def http_kwargs(self) -> dict[str, object]:
        """Keyword arguments for http_loader()."""
        return {"timeout": self.http_timeout, "retries": self.http_retries}


class LoggingConfig(BaseModel):
    """Logging system configuration."""

    level: Literal["debug", "info", "human", "warn", "error"] = "human"
    file: Path | None = None
    verbose: int = 0

    model_config = {"extra": "forbid"}


class AppConfig(BaseModel):
    """Complete application configuration.

    This is the root of the configuration tree. It combines all sections
    and is the entry point for validation.
    """

    language: Literal["en", "es"] = "en"
    gen: GenConfig = Field(default_factory=GenConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
