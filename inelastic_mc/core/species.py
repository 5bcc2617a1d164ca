"""
Target species parameter table.

Binding energies, orbital kinetic energies and dipole oscillator strength
fits used by the Kim-Rudd (BEB/BED) ionisation model.

References:
    - Kim & Rudd, Phys. Rev. A 50, 3954 (1994)
    - Rudd, Phys. Rev. A 44, 1644 (1991)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import numpy as np

from inelastic_mc.exceptions import UnsupportedModelError


class Species(Enum):
    """Gas target species.

    Options:
        H: Atomic hydrogen
        HE: Helium
        H2: Molecular hydrogen
    """
    H = "H"
    HE = "He"
    H2 = "H2"


@dataclass(frozen=True)
class SpeciesParameters:
    """
    Immutable constant set for one target species.

    Attributes:
        species: Species this record belongs to
        B: Binding energy [eV]
        U: Orbital kinetic energy [eV]
        N: Number of bound electrons
        Ni: Effective electron number (integral of the oscillator strength)
        osc_coeffs: Oscillator strength fit coefficients (b, c, d, e, f)
    """
    species: Species
    B: float
    U: float
    N: float
    Ni: float
    osc_coeffs: Tuple[float, float, float, float, float]

    @property
    def coeff_array(self) -> np.ndarray:
        """Oscillator strength coefficients as a float64 array (numba kernels)."""
        return np.array(self.osc_coeffs, dtype=np.float64)


SPECIES_PARAMETERS = {
    Species.H: SpeciesParameters(
        species=Species.H,
        B=13.6057,
        U=13.6057,
        N=1.0,
        Ni=0.4343,
        osc_coeffs=(-2.2473e-2, 1.1775, -4.6264e-1, 8.9064e-2, 0.0),
    ),
    Species.HE: SpeciesParameters(
        species=Species.HE,
        B=24.59,
        U=39.51,
        N=2.0,
        Ni=1.605,
        osc_coeffs=(0.0, 1.2178e1, -2.9585e1, 3.1251e1, -1.2175e1),
    ),
    Species.H2: SpeciesParameters(
        species=Species.H2,
        B=15.43,
        U=25.68,
        N=2.0,
        Ni=1.173,
        osc_coeffs=(0.0, 1.1262, 6.3982, -7.8055, 2.1440),
    ),
}


def resolve_species(species: Union[Species, str]) -> Species:
    """
    Convert a Species or its string value into a Species.

    Raises:
        UnsupportedModelError: If the value names no known species
    """
    if isinstance(species, Species):
        return species
    try:
        return Species(species)
    except ValueError:
        raise UnsupportedModelError(
            f"Species not recognised: {species!r}. "
            f"Available: {[s.value for s in Species]}"
        ) from None


def get_species_parameters(species: Union[Species, str]) -> SpeciesParameters:
    """
    Look up the constant record for a target species.

    Parameters:
        species: Species member or its value ('H', 'He', 'H2')

    Returns:
        SpeciesParameters for the species

    Raises:
        UnsupportedModelError: If the species is not in the table
    """
    key = resolve_species(species)
    if key not in SPECIES_PARAMETERS:
        raise UnsupportedModelError(f"No parameters tabulated for species {key.value}")
    return SPECIES_PARAMETERS[key]
