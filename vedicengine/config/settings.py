"""Configuration models and helpers for vedicengine settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

__all__ = [
    "CONFIG_FILENAME",
    "CompatibilityCfg",
    "DashaCfg",
    "EphemerisCfg",
    "HousesCfg",
    "Settings",
    "ZodiacCfg",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]

CONFIG_FILENAME = "settings.yaml"
CURRENT_SETTINGS_SCHEMA_VERSION = 1

# -------------------- Settings Schema --------------------


class ZodiacCfg(BaseModel):
    """Zodiac frame handed to the ephemeris backend."""

    type: Literal["sidereal", "tropical"] = "sidereal"
    ayanamsa: Literal["lahiri", "raman", "krishnamurti", "fagan_bradley"] = "lahiri"


class HousesCfg(BaseModel):
    system: Literal["placidus", "whole_sign", "equal", "koch", "porphyry"] = "placidus"


class EphemerisCfg(BaseModel):
    """Position backend selection."""

    source: Literal["swiss", "placeholder"] = "swiss"
    path: Optional[str] = None
    allow_placeholder: bool = True


class DashaCfg(BaseModel):
    """Vimshottari sequence construction."""

    year_basis_days: float = Field(default=365.25, gt=0.0)
    horizon_years: float = Field(default=120.0, gt=0.0, le=1200.0)
    balance_mode: Literal["scaled", "elapsed"] = "scaled"


class CompatibilityCfg(BaseModel):
    """Score thresholds for the compatibility verdict."""

    excellent: int = 24
    good: int = 16
    average: int = 8

    @field_validator("excellent", "good", "average", mode="before")
    @classmethod
    def _cap_threshold(cls, value: int) -> int:
        return max(0, min(36, int(value)))

    @model_validator(mode="after")
    def _ordered(self) -> CompatibilityCfg:
        if not self.excellent >= self.good >= self.average:
            raise ValueError("thresholds must satisfy excellent >= good >= average")
        return self


class Settings(BaseModel):
    """Top-level persisted configuration."""

    schema_version: int = CURRENT_SETTINGS_SCHEMA_VERSION
    zodiac: ZodiacCfg = Field(default_factory=ZodiacCfg)
    houses: HousesCfg = Field(default_factory=HousesCfg)
    ephemeris: EphemerisCfg = Field(default_factory=EphemerisCfg)
    dasha: DashaCfg = Field(default_factory=DashaCfg)
    compatibility: CompatibilityCfg = Field(default_factory=CompatibilityCfg)


# -------------------- Persistence --------------------


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    return Path(os.environ.get("VEDICENGINE_HOME", str(Path.home() / ".vedicengine")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(settings.model_dump(), handle, sort_keys=False, allow_unicode=True)
    return target_path


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        return settings
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raw = {}
    return Settings(**raw)
