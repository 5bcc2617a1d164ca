"""Tests for the species parameter table."""

import dataclasses

import numpy as np
import pytest

from inelastic_mc.core.species import (
    SPECIES_PARAMETERS,
    Species,
    get_species_parameters,
    resolve_species,
)
from inelastic_mc.exceptions import UnsupportedModelError


def test_every_species_is_tabulated():
    assert set(SPECIES_PARAMETERS) == set(Species)


@pytest.mark.parametrize("species", list(Species))
def test_lookup_by_enum_and_value_agree(species):
    assert get_species_parameters(species) is get_species_parameters(species.value)


def test_hydrogen_constants():
    p = get_species_parameters(Species.H)
    assert p.B == 13.6057
    assert p.U == 13.6057
    assert p.N == 1.0
    assert p.Ni == 0.4343
    assert p.osc_coeffs == (-2.2473e-2, 1.1775, -4.6264e-1, 8.9064e-2, 0.0)


def test_helium_and_molecular_hydrogen_constants():
    he = get_species_parameters("He")
    h2 = get_species_parameters("H2")
    assert (he.B, he.U, he.N, he.Ni) == (24.59, 39.51, 2.0, 1.605)
    assert (h2.B, h2.U, h2.N, h2.Ni) == (15.43, 25.68, 2.0, 1.173)
    assert he.osc_coeffs[-1] == -1.2175e1
    assert h2.osc_coeffs[1] == 1.1262


def test_binding_energies_not_below_rydberg():
    from inelastic_mc.constants import RYDBERG_EV
    for p in SPECIES_PARAMETERS.values():
        assert p.B >= RYDBERG_EV


def test_records_are_immutable():
    p = get_species_parameters(Species.H)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.B = 1.0


def test_coeff_array():
    arr = get_species_parameters(Species.HE).coeff_array
    assert arr.dtype == np.float64
    np.testing.assert_array_equal(arr, [0.0, 12.178, -29.585, 31.251, -12.175])


@pytest.mark.parametrize("bad", ["Li", "h", "", None, 3])
def test_unknown_species_raises(bad):
    with pytest.raises(UnsupportedModelError):
        get_species_parameters(bad)


def test_unsupported_model_error_is_value_error():
    with pytest.raises(ValueError):
        resolve_species("Xe")
