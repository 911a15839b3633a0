"""
Configuration loader for venue_router.

Pydantic models validate the settings; ``load_settings`` merges a YAML file
with environment variables. Any setting can be overridden from the
environment using ``__`` as the nesting separator, e.g. ``router.cache.ttl_ms``
is ``VENUE_ROUTER_ROUTER__CACHE__TTL_MS``.

Every field has a default, so ``Settings()`` is a complete, valid
configuration matching the built-in market tables.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_core import PydanticCustomError

from venue_router.venues.markets import SYMBOL_CONFIG, VENUE_METADATA

ENV_PREFIX = "VENUE_ROUTER"

# --- Custom Exceptions ---

class ConfigError(Exception):
    """Custom exception for configuration-related errors."""
    pass

# --- Pydantic Models for Configuration Sections ---

class CacheSettings(BaseModel):
    """Quote cache TTL."""
    ttl_ms: int = Field(5_000, gt=0)

class HistorySettings(BaseModel):
    """Best-venue history ring size and the default slice returned with snapshots."""
    limit: int = Field(120, gt=0)
    window: int = Field(60, gt=0)

    @field_validator('window')
    def window_within_limit(cls, v, values):
        limit = values.data.get('limit')
        if limit is not None and v > limit:
            raise PydanticCustomError(
                "history_window_invalid",
                "History window {window} cannot exceed the ring limit {limit}",
                {"window": v, "limit": limit},
            )
        return v

class VenueLabel(BaseModel):
    label: str

class RouterSettings(BaseModel):
    """Market tables consumed by the aggregator and route simulator."""
    symbols: Dict[str, Dict[str, str]] = Field(default_factory=lambda: {k: dict(v) for k, v in SYMBOL_CONFIG.items()})
    venues: Dict[str, VenueLabel] = Field(default_factory=lambda: {k: VenueLabel(**v) for k, v in VENUE_METADATA.items()})
    cache: CacheSettings = Field(default_factory=CacheSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)

    @model_validator(mode='after')
    def symbol_venues_have_labels(self):
        for symbol, mapping in self.symbols.items():
            unknown = [v for v in mapping if v not in self.venues]
            if unknown:
                raise PydanticCustomError(
                    "symbol_venue_unknown",
                    "Symbol '{symbol}' maps to venues without a label entry: {unknown}",
                    {"symbol": symbol, "unknown": unknown},
                )
        return self

    def venue_labels(self) -> Dict[str, Dict[str, str]]:
        return {vid: {"label": v.label} for vid, v in self.venues.items()}

class ExchangeSettings(BaseModel):
    """HTTP settings for the public ticker adapters."""
    timeout_s: float = Field(10.0, gt=0)
    # venue_id -> requests/sec; unset venues use the registry's published limit
    rate_limit_rps: Dict[str, float] = Field(default_factory=dict)
    # binance geo-block (451) falls back to a CoinGecko reference quote
    reference_fallback: bool = True

    @field_validator('rate_limit_rps')
    def rates_positive(cls, v):
        for vid, rps in v.items():
            if rps <= 0:
                raise PydanticCustomError(
                    "rate_limit_invalid",
                    "Rate limit for '{venue}' must be > 0, got {rps}",
                    {"venue": vid, "rps": rps},
                )
        return v

class LoggingSettings(BaseModel):
    level: str = "INFO"

class Settings(BaseModel):
    """The main settings model, aggregating all other configuration models."""
    router: RouterSettings = Field(default_factory=RouterSettings)
    exchanges: ExchangeSettings = Field(default_factory=ExchangeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

# --- Helper Functions ---

def _load_config_from_yaml(path: Path) -> Dict[str, Any]:
    """Loads the YAML configuration file."""
    if not path.is_file():
        raise ConfigError(f"Configuration file not found at: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML file at {path}: {e}") from e

def _get_env_overrides(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """
    Parses environment variables and converts them into a nested dict.
    e.g., VENUE_ROUTER_ROUTER__CACHE__TTL_MS=2000 becomes
    {'router': {'cache': {'ttl_ms': 2000}}}
    """
    overrides: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(prefix + "_"):
            continue
        parts = key.removeprefix(prefix).strip("_").lower().split("__")
        # JSON for lists, dicts, booleans and numbers; everything else stays a string
        if (value.startswith('[') and value.endswith(']')) or \
           (value.startswith('{') and value.endswith('}')) or \
           value.lower() in ['true', 'false', 'null'] or \
           value.replace('.', '', 1).isdigit():
            try:
                parsed_value = json.loads(value)
            except (json.JSONDecodeError, AttributeError):
                parsed_value = value
        else:
            parsed_value = value

        d = overrides
        for part in parts[:-1]:
            d = d.setdefault(part, {})
        d[parts[-1]] = parsed_value
    return overrides

def _merge_configs(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges the override dict into the base dict.
    Overwrites values, dictionaries, and lists.
    """
    for key, value in overrides.items():
        if isinstance(value, dict) and key in base and isinstance(base[key], dict):
            base[key] = _merge_configs(base[key], value)
        else:
            base[key] = value
    return base

# --- Public API ---

def load_settings(path: str = "settings.yaml", use_env: bool = True) -> Settings:
    """
    Loads, validates, and returns the application settings.

    Args:
        path: The path to the YAML configuration file.
        use_env: Merge ``VENUE_ROUTER_*`` environment overrides on top.

    Returns:
        A validated ``Settings`` object.

    Raises:
        ConfigError: If the file is not found, cannot be parsed, or if
                     validation fails.
    """
    logger.info(f"Loading settings from '{path}'...")

    yaml_config = _load_config_from_yaml(Path(path))
    if yaml_config is None:
        yaml_config = {}
    if not isinstance(yaml_config, dict):
        raise ConfigError(f"YAML file '{path}' must contain a mapping at the top level.")

    final_config = _merge_configs(yaml_config, _get_env_overrides()) if use_env else yaml_config

    try:
        settings = Settings.model_validate(final_config)
        logger.debug("Settings loaded and validated successfully.")
        return settings
    except ValidationError as e:
        error_details = e.errors()
        error_msg = f"Configuration validation failed with {len(error_details)} error(s):\n"
        for error in error_details:
            loc = " -> ".join(map(str, error['loc'])) if error['loc'] else "root"
            error_msg += f"  - Location: {loc}\n    Message: {error['msg']}\n"

        logger.error(error_msg)
        raise ConfigError("Failed to validate settings.") from e

def settings_or_default(path: Optional[str]) -> Settings:
    """``load_settings(path)`` when a path is given, built-in defaults otherwise."""
    return load_settings(path) if path else Settings()
