"""
Configuration management for MemberRoot.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from memberroot.exceptions import InvalidConfigurationError
from memberroot.logging_config import get_logger

logger = get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${MEMBERROOT_LOG_LEVEL}" -> value of MEMBERROOT_LOG_LEVEL env var
        "${MEMBERROOT_LOG_LEVEL:INFO}" -> value of the env var or "INFO" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class TreeConfig:
    """Hash tree configuration."""

    identifier_length: int = 32  # Bytes per identifier (32 for public keys)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    json_format: bool = True


@dataclass
class MemberRootConfig:
    """Main MemberRoot configuration."""

    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.memberroot/config.yaml")


def get_default_config() -> MemberRootConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        MemberRootConfig: Default configuration object
    """
    return MemberRootConfig(
        tree=TreeConfig(identifier_length=32),
        logging=LoggingConfig(level="INFO", file="", json_format=True),
    )


def load_config(config_path: Optional[str] = None) -> MemberRootConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        MemberRootConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        )
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        )

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping at the top level"
        )

    config_data = _expand_env_vars(config_data)
    logger.debug("Expanded environment variables in configuration")

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
        logger.info(f"Successfully loaded and validated configuration from {config_path}")
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise

    return config


def _build_config_from_dict(config_data: Dict[str, Any]) -> MemberRootConfig:
    """
    Build configuration object from dictionary, filling gaps with defaults.

    Args:
        config_data: Configuration dictionary loaded from YAML

    Returns:
        MemberRootConfig: Configuration object

    Raises:
        InvalidConfigurationError: If a section has unknown or mistyped keys
    """
    default_config = get_default_config()

    tree_data = config_data.get('tree') or {}
    logging_data = config_data.get('logging') or {}

    try:
        tree = TreeConfig(
            identifier_length=int(
                tree_data.get('identifier_length', default_config.tree.identifier_length)
            ),
        )
        logging_config = LoggingConfig(
            level=str(logging_data.get('level', default_config.logging.level)),
            file=str(logging_data.get('file', default_config.logging.file) or ""),
            json_format=_as_bool(
                logging_data.get('json_format', default_config.logging.json_format)
            ),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidConfigurationError(f"Invalid configuration value: {e}") from e

    return MemberRootConfig(tree=tree, logging=logging_config)


def _as_bool(value: Any) -> bool:
    # Environment expansion always produces strings
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off", ""):
            return False
        raise ValueError(f"not a boolean: {value!r}")
    return bool(value)


def _validate_config(config: MemberRootConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if config.tree.identifier_length <= 0:
        raise InvalidConfigurationError(
            f"identifier_length must be positive, got {config.tree.identifier_length}"
        )

    if config.logging.level.upper() not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"Invalid log level '{config.logging.level}'. "
            f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )
