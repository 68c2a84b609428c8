# amc/config/__init__.py
"""Configuration settings and TOML loading for amc."""
from .settings import (
    AmcConfig,
    ExclusionScope,
    FilterConfig,
    DEFAULT_CONFIG_FILENAME,
    RESERVED_FILE_NAMES,
)
from .loader import load_config, config_from_file, config_from_str, default_config

__all__ = [
    "AmcConfig",
    "ExclusionScope",
    "FilterConfig",
    "DEFAULT_CONFIG_FILENAME",
    "RESERVED_FILE_NAMES",
    "load_config",
    "config_from_file",
    "config_from_str",
    "default_config",
]
