"""
Configuration management for MemberRoot.

Handles loading and validation of configuration files.
"""

from memberroot.config.settings import (
    LoggingConfig,
    MemberRootConfig,
    TreeConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "MemberRootConfig",
    "TreeConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
