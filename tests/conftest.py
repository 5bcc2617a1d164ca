"""Pytest configuration and shared fixtures for inelastic_mc tests."""

import pytest

from inelastic_mc.config import SamplingConfig
from inelastic_mc.core.species import Species
from inelastic_mc.physics.cross_sections import CalcType
from inelastic_mc.physics.inelastic import InelasticScatter


@pytest.fixture
def coarse_sampling():
    """Small tables for fast sampling tests."""
    return SamplingConfig(energy_transfer_bins=500, angle_bins=100)


@pytest.fixture
def rudd_h():
    """Rudd 1991, atomic hydrogen, 100 eV, seeded."""
    return InelasticScatter(0.0, CalcType.RUDD1991, Species.H, incident_energy=100.0, seed=1234)


@pytest.fixture
def kim_h():
    """Kim 1994, atomic hydrogen, 100 eV, seeded."""
    return InelasticScatter(0.0, CalcType.KIM1994, Species.H, incident_energy=100.0, seed=1234)
