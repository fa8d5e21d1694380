"""Gridwise config models and loading helpers."""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class LogLevel(StrEnum):
    """Supported logging level names."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ContextSettings(BaseModel):
    """Bounds for session context logs."""

    model_config = ConfigDict(extra="forbid")

    max_recent_operations: int = Field(default=10, ge=1)
    max_conversation_history: int = Field(default=20, ge=1)


class ConfirmationSettings(BaseModel):
    """Destructive-command confirmation gate configuration."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True


class ParserSettings(BaseModel):
    """Command parser tuning."""

    model_config = ConfigDict(extra="forbid")

    max_suggestions: int = Field(default=3, ge=0, le=10)


class ResponseSettings(BaseModel):
    """Response message rendering limits."""

    model_config = ConfigDict(extra="forbid")

    preview_rows: int = Field(default=3, ge=1)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: LogLevel = LogLevel.INFO


class GridwiseConfig(BaseModel):
    """Root Gridwise configuration model."""

    model_config = ConfigDict(extra="forbid")

    context: ContextSettings = ContextSettings()
    confirmation: ConfirmationSettings = ConfirmationSettings()
    parser: ParserSettings = ParserSettings()
    responses: ResponseSettings = ResponseSettings()
    logging: LoggingSettings = LoggingSettings()


class ConfigError(RuntimeError):
    """Raised when config cannot be decoded or validated."""


def decode_mapping_file(path: Path) -> dict[str, object]:
    """Decode a JSON or YAML mapping payload.

    Args:
        path: File path. `.json` is decoded as JSON, anything else as YAML.

    Returns:
        Parsed mapping payload.

    Raises:
        ConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path.name}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Invalid payload in {path.name}: root must be an object")
    return payload


def load_config(path: Path | None) -> GridwiseConfig:
    """Load Gridwise config from disk, defaulting when missing.

    Args:
        path: Config file path, or None for defaults.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        ConfigError: If payload decode or validation fails.
    """
    if path is None or not path.exists():
        return GridwiseConfig()
    payload = decode_mapping_file(path)
    try:
        return GridwiseConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config payload: {exc}") from exc
