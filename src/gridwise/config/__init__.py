"""Gridwise configuration loading."""

from gridwise.config.settings import (
    ConfigError,
    ConfirmationSettings,
    ContextSettings,
    GridwiseConfig,
    LoggingSettings,
    LogLevel,
    ParserSettings,
    ResponseSettings,
    decode_mapping_file,
    load_config,
)

__all__ = [
    "ConfigError",
    "ConfirmationSettings",
    "ContextSettings",
    "GridwiseConfig",
    "LogLevel",
    "LoggingSettings",
    "ParserSettings",
    "ResponseSettings",
    "decode_mapping_file",
    "load_config",
]
