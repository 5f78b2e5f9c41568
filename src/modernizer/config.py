"""Configuration management for Baseline Modernizer."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Use tomllib on Python 3.11+, fall back to tomli for 3.10
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from .scanner import DEFAULT_EXCLUDE_DIRS, DEFAULT_MAX_FILE_BYTES

logger = logging.getLogger(__name__)

# Default style for TUI
DEFAULT_STYLE = "rich"
VALID_STYLES = ("rich", "plain")


@dataclass
class ScannerConfig:
    """Configuration for the legacy pattern scanner."""

    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES   # Larger files are skipped
    exclude_dirs: list[str] = field(default_factory=lambda: sorted(DEFAULT_EXCLUDE_DIRS))


@dataclass
class Config:
    """Baseline Modernizer configuration."""

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    style: str = field(default=DEFAULT_STYLE)
    debug_logging: bool = field(default=False)  # Enable debug logging to file (opt-in)
    load_sample_data: bool = field(default=False)  # Seed the dashboard with demo data
    most_used_limit: int = field(default=10)
    export_dir: str | None = field(default=None)  # Defaults to the current directory


DEFAULT_CONFIG = Config()

# Config file path
CONFIG_DIR = Path.home() / ".modernizer"
CONFIG_FILE = CONFIG_DIR / "config.toml"

ENV_PREFIX = "MODERNIZER_"


def _env_bool(name: str) -> bool | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes")


def _env_int(name: str) -> int | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring {ENV_PREFIX}{name}={value!r}: not an integer")
        return None


def _file_value(data: dict[str, Any], key: str, expected: type, default: Any) -> Any:
    """Value of `key` from a parsed config table, or `default` if missing or mistyped."""
    if key not in data:
        return default
    value = data[key]
    # bool is an int subclass, so reject it explicitly for int settings
    if isinstance(value, expected) and not (expected is int and isinstance(value, bool)):
        return value
    logger.warning(f"Ignoring config {key}={value!r}: expected {expected.__name__}")
    return default


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from environment, file, or defaults.

    Priority (highest to lowest):
    1. Environment variables (MODERNIZER_*)
    2. Config file (~/.modernizer/config.toml)
    3. Hardcoded defaults
    """
    config_file = config_file or CONFIG_FILE

    style = DEFAULT_CONFIG.style
    debug_logging = DEFAULT_CONFIG.debug_logging
    load_sample_data = DEFAULT_CONFIG.load_sample_data
    most_used_limit = DEFAULT_CONFIG.most_used_limit
    export_dir = DEFAULT_CONFIG.export_dir
    scanner = ScannerConfig()

    data = None
    if config_file.exists():
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable config {config_file}: {e}")

    if data is not None:
        style = _file_value(data, "style", str, style)
        debug_logging = _file_value(data, "debug_logging", bool, debug_logging)
        load_sample_data = _file_value(data, "load_sample_data", bool, load_sample_data)
        most_used_limit = _file_value(data, "most_used_limit", int, most_used_limit)
        export_dir = _file_value(data, "export_dir", str, export_dir)
        scanner_data = data.get("scanner", {})
        if isinstance(scanner_data, dict) and scanner_data:
            exclude_dirs = _file_value(scanner_data, "exclude_dirs", list, sorted(DEFAULT_EXCLUDE_DIRS))
            scanner = ScannerConfig(
                max_file_bytes=_file_value(scanner_data, "max_file_bytes", int, DEFAULT_MAX_FILE_BYTES),
                exclude_dirs=[str(d) for d in exclude_dirs],
            )

    # Environment variables override everything
    style = os.getenv(ENV_PREFIX + "STYLE", style)
    export_dir = os.getenv(ENV_PREFIX + "EXPORT_DIR", export_dir)
    env_debug = _env_bool("DEBUG_LOGGING")
    if env_debug is not None:
        debug_logging = env_debug
    env_sample = _env_bool("LOAD_SAMPLE_DATA")
    if env_sample is not None:
        load_sample_data = env_sample
    env_limit = _env_int("MOST_USED_LIMIT")
    if env_limit is not None:
        most_used_limit = env_limit

    if style not in VALID_STYLES:
        logger.warning(f"Unknown style {style!r}, using {DEFAULT_STYLE}")
        style = DEFAULT_STYLE

    return Config(
        scanner=scanner,
        style=style,
        debug_logging=debug_logging,
        load_sample_data=load_sample_data,
        most_used_limit=most_used_limit,
        export_dir=export_dir,
    )


def save_config(config: Config, config_file: Path | None = None) -> None:
    """Save configuration to file."""
    config_file = config_file or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "style": config.style,
        "debug_logging": config.debug_logging,
        "load_sample_data": config.load_sample_data,
        "most_used_limit": config.most_used_limit,
    }
    if config.export_dir:
        data["export_dir"] = config.export_dir

    # Save scanner config only if non-default
    if config.scanner != ScannerConfig():
        data["scanner"] = {
            "max_file_bytes": config.scanner.max_file_bytes,
            "exclude_dirs": list(config.scanner.exclude_dirs),
        }

    with open(config_file, "wb") as f:
        tomli_w.dump(data, f)
