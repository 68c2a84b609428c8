# amc/config/loader.py
"""
Handles loading configuration from TOML files.
"""
import toml
from pathlib import Path
from typing import Dict, Any, List, Union
import structlog

from amc.exceptions import ConfigError

from .settings import AmcConfig, ExclusionScope

log = structlog.get_logger(__name__)

# toml key -> AmcConfig attribute.
CONFIG_KEY_TO_AMCCONFIG_ATTR_MAP: Dict[str, str] = {
    "delimiter": "delimiter",
    "extensions": "extensions",
    "excluded_folders": "excluded_folders",
    "exclude_folders": "excluded_folders",
    "exclusion_scope": "exclusion_scope",
}

_LIST_ATTRS = ("extensions", "excluded_folders")


def default_config() -> AmcConfig:
    return AmcConfig()


def _coerce_string_list(key: str, value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"config key '{key}' must be a list of strings, got {value!r}")
    return list(value)


def _config_from_mapping(data: Dict[str, Any]) -> AmcConfig:
    config = default_config()
    for key, value in data.items():
        attr = CONFIG_KEY_TO_AMCCONFIG_ATTR_MAP.get(key)
        if attr is None:
            log.debug("unknown_config_key_ignored", key=key)
            continue
        if attr in _LIST_ATTRS:
            setattr(config, attr, _coerce_string_list(key, value))
        elif attr == "exclusion_scope":
            if not isinstance(value, str):
                raise ConfigError(f"config key '{key}' must be a string, got {value!r}")
            config.exclusion_scope = ExclusionScope.from_string(value)
        else:
            if not isinstance(value, str):
                raise ConfigError(f"config key '{key}' must be a string, got {value!r}")
            setattr(config, attr, value)

    if not config.extensions:
        log.warning("config_extensions_empty", note="no file will match an empty extension list.")
    return config


def config_from_str(content: str) -> AmcConfig:
    """Parses configuration from a TOML string."""
    try:
        data = toml.loads(content)
    except toml.TomlDecodeError as e:
        raise ConfigError(f"failed to parse config: {e}") from e
    return _config_from_mapping(data)


def config_from_file(path: Union[str, Path]) -> AmcConfig:
    """Loads configuration from the given file path.

    For ``pyproject.toml`` the settings are read from the ``[tool.amc]`` table;
    any other file is read from its top level.
    """
    file_path = Path(path)
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file: {file_path}: {e}") from e

    if file_path.name == "pyproject.toml":
        try:
            data = toml.loads(content)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"failed to parse config: {file_path}: {e}") from e
        return _config_from_mapping(data.get("tool", {}).get("amc", {}))
    return config_from_str(content)


def load_config(path: Union[str, Path]) -> AmcConfig:
    """Loads configuration from ``path``, falling back to defaults if it does not exist."""
    file_path = Path(path)
    if file_path.exists():
        log.info("loading_config_file", path=str(file_path))
        return config_from_file(file_path)
    log.info("config_file_not_found_using_defaults", path=str(file_path))
    return default_config()
