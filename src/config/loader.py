"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. Field defaults      -- declared on Settings
#   2. config/config.yaml  -- optional static file for a deployment
#   3. .env file           -- key=value lines in the working directory
#   4. Environment vars    -- set in Docker/compose at deploy time
#
# YAML may be flat (``chroma_url: ...``) or grouped one level deep
# (``chroma: {url: ...}``); groups are flattened to ``<group>_<key>``
# so both spellings land on the same Settings field.
# ──────────────────────────────────────────────────────────────────────
"""

import os
from pathlib import Path

import yaml
from dotenv import dotenv_values

from src.config.settings import Settings
from src.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml") -> dict:
    """Load the YAML config file as a flat dict of Settings field names.

    A missing file yields an empty dict.

    Raises:
        ConfigurationError: If the file exists but is not a YAML mapping.
    """
    config_path = Path(path)
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(message=f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(message=f"{path} must contain a mapping at the top level")

    return _flatten(raw)


def load_settings(path: str = "config/config.yaml") -> Settings:
    """Build Settings from YAML defaults, letting the environment and .env win.

    Only keys that name a Settings field are used; unknown keys are ignored
    so one YAML file can be shared with other tooling.  A YAML key is dropped
    when the same field is set in the process environment or in the .env
    file, since init kwargs would otherwise outrank both.
    """
    yaml_config = load_config(path)
    known = Settings.model_fields.keys()
    shadowed = {name.upper() for name in os.environ} | _dotenv_keys()
    overrides = {
        key: value
        for key, value in yaml_config.items()
        if key in known and key.upper() not in shadowed
    }
    return Settings(**overrides)


def _dotenv_keys() -> set[str]:
    """Return the upper-cased variable names set in the Settings .env file."""
    env_file = Settings.model_config.get("env_file")
    if not env_file or not Path(env_file).is_file():
        return set()
    return {name.upper() for name in dotenv_values(env_file)}


def _flatten(config: dict, prefix: str = "") -> dict:
    """Flatten nested mappings into ``<parent>_<child>`` keys."""
    flat: dict = {}
    for key, value in config.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, name))
        else:
            flat[name] = value
    return flat
