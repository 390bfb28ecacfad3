"""
Application settings (Pydantic).

Settings are loaded from `src/trono/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `TRONO_CONFIG_PATH`
- a small whitelist of environment variables (e.g., `TRONO_LOG_LEVEL`)

Design rule:
- Tuning knobs (movement threshold, labels, watch timeouts) live in YAML, not in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from trono.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `trono.config`."""
    text = resources.files("trono.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "Trono"
    log_level: str = "INFO"


class StoreSettings(BaseModel):
    enabled: bool = True
    dir: str = ".cache/trono"


class CatalogSettings(BaseModel):
    path: str = "data/pois.json"


class WatchSettings(BaseModel):
    enable_high_accuracy: bool = True
    maximum_age_ms: int = Field(5000, ge=0)
    timeout_ms: int = Field(10000, gt=0)


class LocationSettings(BaseModel):
    storage_key: str = "trono_user_location"
    min_movement_threshold_m: float = Field(10.0, ge=0)
    accuracy_improvement_ratio: float = Field(0.5, gt=0, le=1)
    watch: WatchSettings = Field(default_factory=WatchSettings)


class RankingSettings(BaseModel):
    gender_fallback: bool = False


class DisplaySettings(BaseModel):
    free_label: str = "Gratis"
    currency: str = "Bs"
    address_placeholder: str = "Sin dirección"
    no_rating_label: str = "—"


class MapSettings(BaseModel):
    default_latitude: float = Field(19.4326, ge=-90, le=90)
    default_longitude: float = Field(-99.1332, ge=-180, le=180)
    default_zoom: float = 13


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    map: MapSettings = Field(default_factory=MapSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("TRONO_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    store_dir = os.getenv("TRONO_STORE_DIR")
    if store_dir:
        data.setdefault("store", {})["dir"] = store_dir

    catalog_path = os.getenv("TRONO_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("TRONO_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
