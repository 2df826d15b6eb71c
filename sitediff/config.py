import json
import logging
import os
from typing import Dict, Optional, Any

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "sitediff/1.0"

DEFAULT_CONFIG: Dict[str, Any] = {
    "user_agent": DEFAULT_USER_AGENT,
    # None blocks until the server answers
    "timeout": None,
    "log_level": "INFO",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(config_path: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Loads the configuration, merging an optional JSON file over DEFAULT_CONFIG.

    Returns None if the file is missing, unreadable or invalid.
    """
    config_data = dict(DEFAULT_CONFIG)
    if config_path is None:
        return config_data

    if not os.path.exists(config_path):
        logger.error(f"Configuration file not found: {config_path}")
        return None
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            file_data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding JSON from {config_path}: {e}")
        return None
    except OSError as e:
        logger.error(f"Could not read configuration file {config_path}: {e}")
        return None

    if not isinstance(file_data, dict):
        logger.error("Configuration must be a JSON object.")
        return None

    config_data.update(file_data)
    logger.debug(f"Loaded configuration from {config_path}")
    if not validate_config(config_data):
        return None
    return config_data


def validate_config(config: Dict[str, Any]) -> bool:
    """Validates the structure and content of the configuration."""
    if not isinstance(config, dict):
        logger.error("Configuration must be a dictionary.")
        return False

    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

    user_agent = config.get("user_agent")
    if not isinstance(user_agent, str) or not user_agent.strip():
        logger.error("'user_agent' must be a non-empty string.")
        return False

    timeout = config.get("timeout")
    if timeout is not None:
        # bool is an int subclass
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            logger.error("'timeout' must be a positive number of seconds or null.")
            return False

    log_level = config.get("log_level")
    if not isinstance(log_level, str) or log_level.upper() not in LOG_LEVELS:
        logger.error(f"'log_level' must be one of {', '.join(LOG_LEVELS)}.")
        return False

    return True
