"""Configuration: YAML defaults and validated sampling settings.

Usage:
    from inelastic_mc.config import get_default, SamplingConfig
    calc_type = get_default('model.calc_type')
    sampling = SamplingConfig.from_defaults()
"""

from inelastic_mc.config.yaml_loader import get_default, load_defaults
from inelastic_mc.config.settings import SamplingConfig

__all__ = [
    "get_default",
    "load_defaults",
    "SamplingConfig",
]
