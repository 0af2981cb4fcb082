"""
Configuration loading and validation.

This module handles loading of YAML configuration files, fills in
defaults for omitted sections, and validates value ranges.
"""

import copy
import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

SIGNAL_NAMES = ("lexicon", "embedding", "llm")

DEFAULT_CONFIG: Dict[str, Any] = {
    "global": {
        "log_level": "INFO",
        "user_id": "default_user",
        "output_dir": "artifacts",
    },
    "fusion": {
        "weights": {"lexicon": 20, "embedding": 30, "llm": 50},
    },
    "lexicon": {
        "enabled": True,
    },
    "embedding": {
        "enabled": True,
        "provider": "hash",
        "model_name": "all-MiniLM-L6-v2",
        "dim": 384,
        "cache_path": None,
    },
    "deep_analysis": {
        "enabled": True,
        "batch_size": 5,
        "batch_timeout_seconds": 300,
        "max_window_messages": 20,
        "background": True,
        "endpoint": "http://localhost:1234/v1",
        "model": "local-model",
        "timeout_seconds": 120,
        "temperature": 0.3,
    },
    "context": {
        "min_confidence": 0.3,
        "significance_threshold": 0.10,
    },
    "storage": {
        "backend": "memory",
        "path": None,
        "flush_interval_seconds": 1.0,
    },
    "graph": {
        "correlation_threshold": 0.6,
        "contradiction_high": 0.7,
        "contradiction_low": 0.3,
        "indicates_threshold": 0.5,
    },
}


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary merged over the defaults

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return merge_with_defaults(config)


def merge_with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Overlay a (possibly partial) config on top of DEFAULT_CONFIG.

    Nested dictionaries are merged key by key; everything else is replaced.
    """
    merged = copy.deepcopy(DEFAULT_CONFIG)
    _deep_update(merged, config or {})
    return merged


def _deep_update(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in DEFAULT_CONFIG:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    # Fusion weights are percentages that should sum to 100
    weights = get_config_value(config, "fusion.weights", {})
    for name in SIGNAL_NAMES:
        if name not in weights:
            issues.append(f"Missing fusion.weights.{name}")
        elif not 0 <= weights[name] <= 100:
            issues.append(f"fusion.weights.{name} must be in [0, 100], got {weights[name]}")
    total = sum(weights.get(name, 0) for name in SIGNAL_NAMES)
    if weights and total != 100:
        issues.append(f"Fusion weights don't sum to 100: {total} (will be redistributed)")

    batch_size = get_config_value(config, "deep_analysis.batch_size", 5)
    if batch_size < 1:
        issues.append(f"deep_analysis.batch_size must be >= 1, got {batch_size}")

    timeout = get_config_value(config, "deep_analysis.batch_timeout_seconds", 300)
    if timeout <= 0:
        issues.append(f"deep_analysis.batch_timeout_seconds must be > 0, got {timeout}")

    provider = get_config_value(config, "embedding.provider", "hash")
    if provider not in ("hash", "sentence_transformers"):
        issues.append(f"Unknown embedding.provider: {provider}")

    backend = get_config_value(config, "storage.backend", "memory")
    if backend not in ("memory", "file"):
        issues.append(f"Unknown storage.backend: {backend}")
    elif backend == "file" and not get_config_value(config, "storage.path"):
        issues.append("storage.path is required for the file backend")

    threshold = get_config_value(config, "context.min_confidence", 0.3)
    if not 0 <= threshold <= 1:
        issues.append(f"context.min_confidence must be in [0, 1], got {threshold}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "deep_analysis.batch_size")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
