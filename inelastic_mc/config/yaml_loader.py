"""YAML defaults for model selection, sampling and generation.

The packaged defaults.yaml is read once and cached. Point
INELASTIC_MC_DEFAULTS_PATH at another file to replace it; call
``load_defaults.cache_clear()`` after changing the variable.

Usage:
    from inelastic_mc.config import get_default
    n_bins = get_default('sampling.energy_transfer_bins', 5000)
"""

import os
from functools import lru_cache
from pathlib import Path

import yaml

from inelastic_mc.exceptions import ConfigurationError

DEFAULTS_ENV_VAR = "INELASTIC_MC_DEFAULTS_PATH"
PACKAGED_DEFAULTS = Path(__file__).with_name("defaults.yaml")


@lru_cache(maxsize=1)
def load_defaults() -> dict:
    """
    Parse the defaults file.

    Raises:
        ConfigurationError: If the file is missing or is not a YAML mapping
    """
    override = os.getenv(DEFAULTS_ENV_VAR)
    path = Path(override) if override else PACKAGED_DEFAULTS
    if not path.is_file():
        raise ConfigurationError(f"Defaults file not found: {path} ({DEFAULTS_ENV_VAR}={override!r})")

    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{path} must contain a mapping, got {type(config).__name__}")
    return config


def get_default(key_path: str, default=None):
    """
    Look up a value by dotted path, e.g. 'sampling.angle_bins'.

    Returns default when any part of the path is missing.
    """
    value = load_defaults()
    for key in key_path.split("."):
        if not isinstance(value, dict) or value.get(key) is None:
            return default
        value = value[key]
    return value
