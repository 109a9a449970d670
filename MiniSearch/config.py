"""
Configuration loading for MiniSearch.
Defaults live in DEFAULT_CONFIG; a JSON file can override any subset of them.
"""
import copy
import json
import logging
import os

logger = logging.getLogger(__name__)

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG_PATH = os.path.join(PACKAGE_DIR, "config.json")

DEFAULT_CONFIG = {
    "search": {
        "page_size": 3
    },
    "crawler": {
        "max_workers": 5,
        "connect_timeout": 3.0,
        "read_timeout": 3.0,
        "max_content_length": 500,
        "user_agent": "MiniSearchEngine/1.0",
        "shutdown_timeout": 10.0
    },
    "display": {
        "preview_length": 80
    },
    "cli": {
        "crawl_wait_seconds": 4.0
    },
    "sample_documents": "data/sample_documents.json"
}


def _merge(base, override):
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path=None):
    """
    Load configuration from a JSON file, falling back to defaults.

    Args:
        config_path: Path to a JSON config file (defaults to the packaged config.json)

    Returns:
        Configuration dictionary with every default key present
    """
    config_path = config_path or DEFAULT_CONFIG_PATH

    if not os.path.exists(config_path):
        logger.info("No config file at %s, using default settings", config_path)
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            overrides = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not load config %s: %s, using default settings", config_path, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(overrides, dict):
        logger.warning("Config %s is not a JSON object, using default settings", config_path)
        return copy.deepcopy(DEFAULT_CONFIG)

    return _merge(DEFAULT_CONFIG, overrides)


def resolve_package_path(relative_path):
    """Resolve a path from the config relative to the package directory."""
    if os.path.isabs(relative_path):
        return relative_path
    return os.path.join(PACKAGE_DIR, relative_path)
