"""
Settings for the CSV deduplicator.

Values come from three layers, later ones winning:

1. Built-in defaults.
2. An optional YAML file (``--config``, ``$CSV_DEDUP_CONFIG`` or
   ``./csv_dedup.yaml`` when present).
3. ``CSV_DEDUP_*`` environment variables, including ones from a ``.env`` file.

Sample ``csv_dedup.yaml``
-------------------------
```yaml
case_sensitive: true
encodings: [utf-8-sig, utf-8, latin-1, cp1252]
max_workers: 4
log_level: INFO
output_dir: ./output       # relative to the config file
excel_max_rows: 200000
```
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_KEY = "CSV_DEDUP_CONFIG"
DEFAULT_CONFIG_PATH = Path("csv_dedup.yaml")
DEFAULT_ENCODINGS = ["utf-8-sig", "utf-8", "latin-1", "cp1252"]
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(ValueError):
    """Raised when the YAML configuration is invalid."""


@dataclass
class Settings:
    case_sensitive: bool = True
    encodings: List[str] = field(default_factory=lambda: list(DEFAULT_ENCODINGS))
    max_workers: int = 4
    log_level: str = "INFO"
    output_dir: Path = Path("./output")
    excel_max_rows: int = 200_000


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _parse_list(value: str | None) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _resolve_path(base: Path, value: str) -> Path:
    return (base / value).expanduser().resolve()


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return raw


def _apply_yaml(settings: Settings, raw: Dict[str, Any], base: Path) -> None:
    if "case_sensitive" in raw:
        settings.case_sensitive = bool(raw["case_sensitive"])
    if "encodings" in raw:
        encodings = raw["encodings"]
        if not isinstance(encodings, list) or not encodings:
            raise ConfigError("`encodings` must be a non-empty list of codec names")
        settings.encodings = [str(enc) for enc in encodings]
    for name in ("max_workers", "excel_max_rows"):
        if name in raw:
            try:
                setattr(settings, name, int(raw[name]))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"`{name}` must be an integer, got {raw[name]!r}") from exc
    if "log_level" in raw:
        settings.log_level = str(raw["log_level"]).upper()
    if "output_dir" in raw:
        settings.output_dir = _resolve_path(base, str(raw["output_dir"]))


def _apply_env(settings: Settings) -> None:
    settings.case_sensitive = _parse_bool(os.getenv("CSV_DEDUP_CASE_SENSITIVE"), settings.case_sensitive)
    settings.encodings = _parse_list(os.getenv("CSV_DEDUP_ENCODINGS")) or settings.encodings
    settings.max_workers = _parse_int(os.getenv("CSV_DEDUP_MAX_WORKERS"), settings.max_workers)
    settings.log_level = os.getenv("CSV_DEDUP_LOG_LEVEL", settings.log_level).upper()
    output_dir = os.getenv("CSV_DEDUP_OUTPUT_DIR")
    if output_dir:
        settings.output_dir = Path(output_dir)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Build Settings from defaults, an optional YAML file and the environment."""

    load_dotenv()
    settings = Settings()

    if path is None:
        env_path = os.getenv(CONFIG_ENV_KEY)
        if env_path:
            path = Path(env_path)
        elif DEFAULT_CONFIG_PATH.exists():
            path = DEFAULT_CONFIG_PATH

    if path is not None:
        LOGGER.debug("Reading configuration from %s", path)
        _apply_yaml(settings, _read_yaml(path), path.parent)

    _apply_env(settings)

    if settings.log_level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level '{settings.log_level}'")
    if settings.max_workers < 1:
        settings.max_workers = 1
    return settings
