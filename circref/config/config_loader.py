"""
config_loader.py
-----------------
Reads config.yaml once and caches it. Engine modules read tunables
(recursion ceiling, placeholder labels, worker counts) through here.
"""

import os
import yaml
from typing import Any, Dict


_CONFIG_CACHE: Dict[str, Any] = {}


def load_config(config_path: str | None = None) -> Dict[str, Any]:
    """
    Load and cache the YAML configuration file.

    Args:
        config_path: Path to a config file. Defaults to config.yaml next to this module.
            An explicit path always replaces the cached config.

    Returns:
        Full config dictionary.
    """
    global _CONFIG_CACHE

    if _CONFIG_CACHE and config_path is None:
        return _CONFIG_CACHE

    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), "config.yaml")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        _CONFIG_CACHE = yaml.safe_load(f) or {}

    return _CONFIG_CACHE


def get_detection_config() -> Dict[str, Any]:
    """Returns the detection block."""
    return load_config()["detection"]


def get_reporting_config() -> Dict[str, Any]:
    """Returns the reporting block."""
    return load_config()["reporting"]


def reset_config() -> None:
    """Clears the cached config. Used by tests."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = {}
