"""
Validated sampling settings.

Usage:
    from inelastic_mc.config import SamplingConfig
    sampling = SamplingConfig.from_defaults()
    coarse = SamplingConfig(energy_transfer_bins=500, angle_bins=100)
"""

from dataclasses import dataclass, field
from typing import List

from inelastic_mc.config.yaml_loader import get_default
from inelastic_mc.exceptions import ConfigurationError


def _default_energy_bins() -> int:
    return int(get_default('sampling.energy_transfer_bins', 5000))


def _default_angle_bins() -> int:
    return int(get_default('sampling.angle_bins', 400))


@dataclass(frozen=True)
class SamplingConfig:
    """
    Bin counts for the tabulated sampling distributions.

    Attributes:
        energy_transfer_bins: Bins over the energy transfer domain
        angle_bins: Bins over [0, π/2] for the emission angle
    """
    energy_transfer_bins: int = field(default_factory=_default_energy_bins)
    angle_bins: int = field(default_factory=_default_angle_bins)

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise ConfigurationError(
                f"Sampling configuration invalid with {len(errors)} error(s):\n"
                + "\n".join(f"  - {err}" for err in errors)
            )

    def validate(self) -> List[str]:
        """Return a list of problems (empty when valid)."""
        errors = []
        for name in ('energy_transfer_bins', 'angle_bins'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer, got {value!r}")
            elif value < 2:
                errors.append(f"{name} must be >= 2, got {value}")
        return errors

    @classmethod
    def from_defaults(cls) -> "SamplingConfig":
        """Build from defaults.yaml."""
        return cls()
