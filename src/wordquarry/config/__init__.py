"""Configuration models and loaders."""

from .config import (
    DEFAULT_TOKEN_PATTERN,
    Config,
    ExtractionSettings,
    MonitoringConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "DEFAULT_TOKEN_PATTERN",
    "Config",
    "ExtractionSettings",
    "MonitoringConfig",
    "find_config_file",
    "load_config",
]
