"""Configuration management for k8s-bundle.

Settings are resolved with the following precedence (highest to lowest):
1. CLI argument
2. Environment variable (K8S_BUNDLE_<KEY>)
3. Config file (`.k8s-bundle.yaml` in the config directory)
4. Built-in default

Usage:
    from k8s_bundle_cli.config import get_setting, set_setting, load_config

    # Get a setting with full precedence resolution
    fmt = get_setting("format", cli_value=cli_format, config_dir=Path.cwd())

    # Persist a setting
    set_setting(Path.cwd(), "verbose", True)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from k8s_bundle_cli.errors import (
    ConfigInvalidStructureError,
    ConfigParseError,
    UnknownSettingError,
)

CONFIG_FILENAME = ".k8s-bundle.yaml"

# Known settings and their built-in defaults
DEFAULTS: dict[str, Any] = {
    "format": "text",
    "verbose": False,
}

KNOWN_SETTINGS: frozenset[str] = frozenset(DEFAULTS)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


def get_config_path(config_dir: Path) -> Path:
    """Get the path to the config file in a directory."""
    return config_dir / CONFIG_FILENAME


def load_config(config_dir: Path) -> dict[str, Any]:
    """Load configuration from the config file.

    Args:
        config_dir: Directory holding the config file.

    Returns:
        Config dictionary. Returns empty dict if file doesn't exist.

    Raises:
        ConfigParseError: If the file is not valid YAML.
        ConfigInvalidStructureError: If the top level is not a mapping.
    """
    config_file = get_config_path(config_dir)

    if not config_file.exists():
        return {}

    content = config_file.read_text()
    if not content.strip():
        return {}

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParseError(str(config_file), str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigInvalidStructureError(
            str(config_file), f"expected a mapping, got {type(data).__name__}"
        )
    return data


def save_config(config_dir: Path, config: dict[str, Any]) -> None:
    """Save configuration to the config file, creating config_dir if needed."""
    config_dir.mkdir(parents=True, exist_ok=True)

    # Use default_flow_style=False for readable multi-line YAML
    content = yaml.safe_dump(config, default_flow_style=False, sort_keys=False)
    get_config_path(config_dir).write_text(content)


def _get_env_var_name(key: str) -> str:
    """Convert a setting key to environment variable name (verbose -> K8S_BUNDLE_VERBOSE)."""
    return f"K8S_BUNDLE_{key.upper()}"


def _coerce(key: str, value: Any) -> Any:
    """Coerce string values (env vars, CLI) to the type of the key's default."""
    if isinstance(DEFAULTS.get(key), bool) and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    return value


def get_setting(
    key: str,
    cli_value: Any | None = None,
    config_dir: Path | None = None,
) -> Any | None:
    """Resolve a setting with full precedence.

    Args:
        key: Setting key (e.g., "format", "verbose")
        cli_value: Value passed via CLI argument (highest precedence)
        config_dir: Directory holding the config file

    Returns:
        Resolved value, or the built-in default (None for unknown keys).
    """
    if cli_value is not None:
        return _coerce(key, cli_value)

    env_value = os.environ.get(_get_env_var_name(key))
    if env_value is not None:
        return _coerce(key, env_value)

    if config_dir is not None:
        config = load_config(config_dir)
        if key in config:
            return _coerce(key, config[key])

    return DEFAULTS.get(key)


def set_setting(config_dir: Path, key: str, value: Any) -> None:
    """Set a configuration value in the config file.

    Raises:
        UnknownSettingError: If key is not a known setting.
    """
    if key not in KNOWN_SETTINGS:
        raise UnknownSettingError(key)

    config = load_config(config_dir)
    config[key] = _coerce(key, value)
    save_config(config_dir, config)


def unset_setting(config_dir: Path, key: str) -> bool:
    """Remove a configuration value.

    Returns:
        True if the key existed and was removed, False if key didn't exist.
    """
    config = load_config(config_dir)
    if key not in config:
        return False
    del config[key]
    save_config(config_dir, config)
    return True


def _get_setting_source(key: str, config_dir: Path | None) -> str:
    """Return "env", "file", or "default" for where key's value comes from."""
    if _get_env_var_name(key) in os.environ:
        return "env"
    if config_dir is not None and key in load_config(config_dir):
        return "file"
    return "default"


def list_settings(config_dir: Path | None = None) -> dict[str, dict[str, Any]]:
    """List all settings with their resolved values and sources.

    Returns:
        Dict mapping setting keys to {"value": ..., "source": ...}
    """
    all_keys = set(KNOWN_SETTINGS)
    if config_dir is not None:
        all_keys.update(load_config(config_dir))

    return {
        key: {
            "value": get_setting(key, config_dir=config_dir),
            "source": _get_setting_source(key, config_dir),
        }
        for key in sorted(all_keys)
    }
