from __future__ import annotations

"""Configuration utilities for periodscan.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the phase search parameters, the
multi-offset averaging options, sample source options and logging controls.
Instances can be populated from environment variables or from YAML/JSON files
with matching nested keys.
"""

import json
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import EnvSettingsSource

# Defaults for a 32 kHz capture: PHASE_MAX is about 31 Hz (C1), PHASE_MIN about C2.
SAMPLE_RATE = 32768
PHASE_MIN = 512
PHASE_MAX = 1041
ERROR_MAX = 4294967295
INT64_MAX = 2**63 - 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_ints(value: str) -> list[int]:
    return [int(item) for item in value.split(",") if item.strip()]


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class SearchSettings(SectionModel):
    """Parameters of the candidate phase search."""

    sample_rate: int = Field(default=SAMPLE_RATE, gt=0)
    phase_min: int = Field(default=PHASE_MIN, ge=1)
    phase_max: int = Field(default=PHASE_MAX, ge=2)
    # None sums every window in full; ERROR_MAX reproduces the 32-bit cap.
    error_max: int | None = Field(default=None, gt=0, le=INT64_MAX)
    metric: str = "absolute"
    seed_index: Literal["start", "zero"] = "start"
    prune: bool = True
    block: int = Field(default=64, gt=0)

    @model_validator(mode="after")
    def _check_range(self) -> "SearchSettings":
        if self.phase_min >= self.phase_max:
            raise ValueError("phase_min must be smaller than phase_max")
        return self

    @property
    def window(self) -> int:
        """Width of the comparison window in samples."""

        return self.phase_max - self.phase_min


class AverageSettings(SectionModel):
    """Options for multi-offset phase averaging."""

    offsets: list[int] = Field(default_factory=lambda: [0, 1015, 2320, 7060])
    workers: int = Field(default=1, ge=1)

    @field_validator("offsets", mode="before")
    @classmethod
    def _coerce_offsets(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_ints(value)
        if isinstance(value, int):
            return [value]
        if isinstance(value, (list, tuple)):
            return [int(item) for item in value]
        return value


class SourceSettings(SectionModel):
    """Options controlling how sample files are read."""

    path: str | None = None
    sample_bits: int = 8
    channel: int = Field(default=0, ge=0)

    @field_validator("sample_bits")
    @classmethod
    def _check_bits(cls, value: int) -> int:
        if value not in (8, 16):
            raise ValueError("sample_bits must be 8 or 16")
        return value


class LoggingSettings(SectionModel):
    """Logging verbosity and format."""

    level: str = "WARNING"
    format: str = "%(levelname)s:%(name)s:%(message)s"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class VizSettings(SectionModel):
    """Configuration for the error curve plot."""

    title: str = "Window error"
    save: str | None = None


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    search: SearchSettings = Field(default_factory=SearchSettings)
    average: AverageSettings = Field(default_factory=AverageSettings)
    source: SourceSettings = Field(default_factory=SourceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    viz: VizSettings = Field(default_factory=VizSettings)

    model_config = SettingsConfigDict(
        env_prefix="PERIODSCAN_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Comma separated lists such as ``PERIODSCAN_AVERAGE__OFFSETS=0,100``
        # are not JSON; hand them to the field validators untouched.
        class LenientEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, target_field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, target_field, value)
                except json.JSONDecodeError:
                    return value

        env_settings.__class__ = LenientEnvSettingsSource
        return init_settings, env_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``PERIODSCAN_*`` environment variables only."""

        return cls()


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)
