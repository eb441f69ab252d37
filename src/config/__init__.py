"""
Configuration Module for the Micropub endpoint.

This module provides configuration loading for the service. Configuration is
loaded from config.yml and supports Docker secrets.

Usage:
    >>> from config import load_config
    >>> config = load_config()
    >>> if config.get("micropub", {}).get("publish_posts"):
    ...     # New posts go live immediately
"""
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml


logger = logging.getLogger(__name__)
DEFAULT_TEMPLATE = "basic-page"


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from config.yml file.

    Args:
        config_path: Path to config.yml file. If None, looks in current directory
                    and parent directories.

    Returns:
        Dictionary containing configuration settings. Falls back to
        get_default_config() when the file is missing or unreadable.

    Example:
        >>> config = load_config()
        >>> default_template = config["micropub"]["default_template"]
    """
    if config_path is None:
        # Try to find config.yml in current directory or parent directories
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            candidate = parent / "config.yml"
            if candidate.exists():
                config_path = str(candidate)
                break

        # If still not found, check the project root (where this file is located)
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            candidate = project_root / "config.yml"
            if candidate.exists():
                config_path = str(candidate)

    if config_path is None:
        logger.warning("config.yml not found, using default configuration")
        return get_default_config()

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
            if not isinstance(config, dict):
                logger.warning("Configuration root must be a mapping, using default configuration")
                return get_default_config()
            logger.info(f"Loaded configuration from {config_path}")
            return config
    except FileNotFoundError:
        logger.warning(f"Configuration file not found: {config_path}")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing configuration file: {e}")
        return get_default_config()


def get_default_config() -> Dict[str, Any]:
    """Return default configuration when config.yml is not available.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "cors": {
            "enabled": False,
            "origins": []
        },
        "micropub": {
            "default_template": DEFAULT_TEMPLATE,
            "templates": {},
            "publish_posts": False,
            "wrap_microformat_element": True,
            "verbose_logging": False,
            "token_endpoint": "",
            "me": "",
            "token_timeout": 10,
            "token_file": "/run/secrets/micropub_token"
        },
        "storage": {
            "path": "./data/posts",
            "base_url": "http://localhost:5000"
        }
    }


def read_secret_file(filepath: str) -> Optional[str]:
    """Read a Docker secret from a file.

    Docker secrets are mounted as files in /run/secrets/ directory.

    Args:
        filepath: Path to the secret file

    Returns:
        Content of the secret file (stripped of whitespace), or None if file doesn't exist

    Example:
        >>> token = read_secret_file("/run/secrets/micropub_token")
    """
    try:
        with open(filepath, "r") as f:
            return f.read().strip()
    except FileNotFoundError:
        logger.debug(f"Secret file not found: {filepath}")
        return None
    except OSError as e:
        logger.error(f"Error reading secret file {filepath}: {e}")
        return None
