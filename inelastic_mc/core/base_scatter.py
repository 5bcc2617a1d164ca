"""
State shared by all scatter types.

Holds the incident particle's kinetic energy (updated between collisions
by the event generator), the ambient gas temperature and the random
number generator owned by the scatter instance.
"""

from typing import Optional, Union

import numpy as np


class BaseScatter:
    """
    Base scatter state.

    The random generator is created once per instance and reused for
    every draw. Instances must not share a generator across threads.

    Usage:
        scatter = BaseScatter(temperature=300.0, seed=42)
        scatter.incident_energy = 100.0
        u = scatter.rng.random()
    """

    def __init__(self, temperature: float, incident_energy: Optional[float] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        """
        Initialize scatter state.

        Parameters:
            temperature: Gas temperature [K]
            incident_energy: Incident kinetic energy [eV] (may be set later)
            rng: Generator to draw from (takes precedence over seed)
            seed: Seed for a new generator when rng is not given
        """
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")

        self.temperature = float(temperature)
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._incident_energy = None

        if incident_energy is not None:
            self.incident_energy = incident_energy

    @property
    def incident_energy(self) -> float:
        """Incident kinetic energy [eV]."""
        if self._incident_energy is None:
            raise ValueError("Incident energy has not been set")
        return self._incident_energy

    @incident_energy.setter
    def incident_energy(self, energy_eV: float):
        self._incident_energy = self._validate_energy(float(energy_eV))

    def _validate_energy(self, energy_eV: float) -> float:
        if not np.isfinite(energy_eV) or energy_eV <= 0.0:
            raise ValueError(f"Incident energy must be positive and finite, got {energy_eV}")
        return energy_eV

    @property
    def rng(self) -> np.random.Generator:
        """Random generator owned by this instance."""
        return self._rng

    def seed(self, seed: Union[int, np.random.SeedSequence]):
        """Re-seed the owned generator (deterministic testing)."""
        self._rng = np.random.default_rng(seed)

    def __repr__(self) -> str:
        energy = self._incident_energy
        energy_str = f"{energy:.4g} eV" if energy is not None else "unset"
        return f"{type(self).__name__}(E={energy_str}, T={self.temperature:.1f} K)"
