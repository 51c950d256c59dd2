"""
Configuration management for WordQuarry using Pydantic.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wordquarry.exceptions import ConfigurationError

# --- Setup Logging ---
log = logging.getLogger(__name__)

# ASCII letters, digits, apostrophe, or any Unicode letter. Underscore is not a word character.
DEFAULT_TOKEN_PATTERN = r"(?:[a-zA-Z0-9']|[^\W\d_])+"

# --- Nested Configuration Models ---


class ExtractionSettings(BaseModel):
    """Switches and tokenization pattern for one extraction run."""

    model_config = ConfigDict(frozen=True)

    force_lowercase: bool = Field(default=False, description="Lowercase every token before insertion.")
    ignore_script_tags: bool = Field(default=False, description="Track <script> regions as ignored.")
    ignore_style_tags: bool = Field(default=False, description="Suppress text inside <style> regions.")
    ignore_comments: bool = Field(default=False, description="Suppress comment text.")
    check_content_type: bool = Field(
        default=True, description="Skip documents whose Content-Type is binary (image, audio, video, pdf...)."
    )
    token_pattern: str = Field(
        default=DEFAULT_TOKEN_PATTERN, description="Regular expression defining a single word."
    )
    encoding: Optional[str] = Field(
        default=None, description="Body text encoding. None uses the platform's preferred encoding."
    )
    decode_errors: Literal["strict", "replace", "ignore"] = Field(
        default="strict",
        description=(
            "How undecodable body bytes are handled. 'strict' fails the whole document on a bad byte;"
            " 'replace' substitutes U+FFFD and keeps the rest of the document."
        ),
    )

    @field_validator("token_pattern")
    @classmethod
    def validate_token_pattern(cls, v: str) -> str:
        """Ensure the token pattern is a valid regular expression."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"token_pattern is not a valid regular expression: {e}") from e
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: Optional[str]) -> Optional[str]:
        """Ensure the encoding name is known to the codecs registry."""
        if v is None:
            return None
        try:
            "".encode(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="WORDQUARRY_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            try:
                yaml_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        if not isinstance(yaml_data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {path}")
        try:
            return cls.model_validate(yaml_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "wordquarry.yaml",
        current_dir / "wordquarry.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from ``path``, a discovered config file, or defaults."""
    config_path = path or find_config_file()
    if config_path:
        log.info("Loading configuration from: %s", config_path)
        return Config.from_yaml(config_path)
    log.debug("No config file found. Using default settings.")
    return Config()
