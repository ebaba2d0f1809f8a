from __future__ import annotations

"""Configuration utilities for sigscope.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the defaults used by the generator, the
spectral analyser, the filter designers and the statistics helpers.  Instances
can be populated from environment variables or from YAML/JSON files with
matching nested keys.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

try:  # pragma: no cover - optional dependency
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


WINDOW_NAMES = ("hanning", "hamming", "blackman", "kaiser", "none")


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class GeneratorSettings(SectionModel):
    """Defaults for waveform and noise synthesis."""

    sample_rate: float = Field(1000.0, gt=0)
    duration: float = Field(1.0, ge=0)
    amplitude: float = 1.0
    frequency: float = 10.0
    seed: int | None = None


class SpectrumSettings(SectionModel):
    """Defaults for FFT based analysis."""

    sample_rate: float = Field(1000.0, gt=0)
    window: str = "hanning"
    peak_threshold: float = Field(0.1, ge=0)
    window_size: int = Field(256, gt=0)
    overlap: float = Field(0.5, ge=0, lt=1)

    @field_validator("window")
    @classmethod
    def _known_window(cls, value: str) -> str:
        value = value.lower()
        if value not in WINDOW_NAMES:
            raise ValueError(f"window must be one of {WINDOW_NAMES}")
        return value


class FilterSettings(SectionModel):
    """Defaults for IIR filter design."""

    order: int = Field(2, ge=1)
    notch_bandwidth: float = Field(10.0, gt=0)


class StatisticsSettings(SectionModel):
    """Defaults for descriptive statistics helpers."""

    histogram_bins: int = Field(10, gt=0)
    outlier_factor: float = Field(1.5, ge=0)
    ema_alpha: float = Field(0.1, gt=0, le=1)


class LoggingSettings(SectionModel):
    """Options for :func:`sigscope.utils.logging.get_logger`."""

    level: str = "INFO"
    format: str = "%(levelname)s:%(name)s:%(message)s"


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    spectrum: SpectrumSettings = Field(default_factory=SpectrumSettings)
    filter: FilterSettings = Field(default_factory=FilterSettings)
    statistics: StatisticsSettings = Field(default_factory=StatisticsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="SIGSCOPE_",
        env_nested_delimiter="__",
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML is required to load YAML files")
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)
