"""Scattered primary kinematics."""

import math

import numpy as np
import pytest

from inelastic_mc.constants import RYDBERG_EV
from inelastic_mc.exceptions import NonPhysicalKinematicsError
from inelastic_mc.physics.kinematics import (
    minimum_event_energy,
    scattered_primary_angle,
    scattered_primary_energy,
)

B_H = 13.6057


def test_energy_conservation():
    for W in (20.0, 43.2, 60.0, 86.0):
        E1 = scattered_primary_energy(100.0, W, B_H)
        assert E1 + W + B_H == pytest.approx(100.0, abs=1e-12)


def test_energy_not_validated():
    assert scattered_primary_energy(100.0, 95.0, B_H) < 0.0


def test_angle_formula():
    E, W = 100.0, 60.0
    E1 = E - W - B_H
    expected = math.acos((E + E1 - W) / (2.0 * math.sqrt(E * E1)))
    assert scattered_primary_angle(E, W, B_H) == pytest.approx(expected, rel=1e-14)


def test_small_transfer_gives_small_angle():
    theta_small = scattered_primary_angle(1000.0, 1.0, B_H)
    theta_large = scattered_primary_angle(1000.0, 300.0, B_H)
    assert 0.0 <= theta_small < theta_large


@pytest.mark.parametrize("W", [86.2, 90.0])
def test_cosine_above_one_raises(W):
    with pytest.raises(NonPhysicalKinematicsError):
        scattered_primary_angle(100.0, W, B_H)


def test_non_positive_primary_energy_raises():
    with pytest.raises(NonPhysicalKinematicsError):
        scattered_primary_angle(100.0, 100.0 - B_H, B_H)


def test_error_is_arithmetic_error():
    with pytest.raises(ArithmeticError):
        scattered_primary_angle(100.0, 95.0, B_H)


def test_scatter_uses_binding_energy(kim_h):
    W = 50.0
    assert kim_h.scattered_primary_energy(W) == pytest.approx(100.0 - W - B_H)
    assert kim_h.scattered_primary_angle(W) == pytest.approx(scattered_primary_angle(100.0, W, B_H))


@pytest.mark.parametrize("B", [RYDBERG_EV, 15.43, 24.59])
def test_minimum_event_energy(B):
    E_min = minimum_event_energy(B)
    assert E_min == 2.0 * B

    def n_physical(E):
        lo, hi = 0.5 * (E - B), E - B
        count = 0
        for W in np.linspace(lo, hi, 402)[1:-1]:
            try:
                scattered_primary_angle(E, W, B)
            except NonPhysicalKinematicsError:
                continue
            count += 1
        return count

    assert n_physical(0.99 * E_min) == 0
    assert n_physical(1.25 * E_min) > 0
