"""Configuration loading for the profiling engine."""

from .loader import (
    DEFAULT_CONFIG,
    load_config,
    merge_with_defaults,
    validate_config,
    get_config_value,
)

__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
    "merge_with_defaults",
    "validate_config",
    "get_config_value",
]
