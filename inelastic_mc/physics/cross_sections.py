"""
Electron-impact ionisation cross-sections.

Two closed-form model families are implemented behind one interface:

    Rudd1991: semi-empirical singly and doubly differential cross-sections
              (binary-encounter lobe + soft-collision lobe).
    Kim1994:  binary-encounter-dipole (BED) model with species-dependent
              oscillator strength fits.

The model family is selected once, when the model object is built; the
numeric kernels below never branch on the selector.

Energies in eV, angles in radians, cross-sections in m² (a0² scale).

References:
    - Rudd, Phys. Rev. A 44, 1644 (1991)
    - Rudd, Kim, Madison, Gay, Rev. Mod. Phys. 64, 441 (1992)
    - Kim & Rudd, Phys. Rev. A 50, 3954 (1994)
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Tuple, Union

import numba
import numpy as np

from inelastic_mc.constants import A0, BOHR_XSEC, RYDBERG_EV
from inelastic_mc.core.species import Species, SpeciesParameters, get_species_parameters
from inelastic_mc.exceptions import UnsupportedModelError

logger = logging.getLogger(__name__)


class CalcType(Enum):
    """Cross-section model family.

    Options:
        RUDD1991: Rudd semi-empirical model (total, single and double differential)
        KIM1994: Kim-Rudd binary-encounter-dipole model (total, single differential)
    """
    RUDD1991 = "rudd1991"
    KIM1994 = "kim1994"


# Rudd 1991 empirical constants
BETA = 0.60
GAMMA = 10.0
G_B = 2.9
N_EXP = 2.5
G5 = 0.33
A1 = 0.74
A2 = 0.87
A3 = -0.6

# Rudd 1991 prefactor
RUDD_S = BOHR_XSEC


# ============================================================================
# Rudd 1991 kernels (omega = W/R, t = E/R)
#
# No fastmath: the cancellation guards below rely on strict IEEE ordering.
# ============================================================================

@numba.njit(cache=True)
def _g2(omega: float, t: float) -> float:
    return np.sqrt((omega + 1.0) / t)


@numba.njit(cache=True)
def _g3(omega: float, t: float) -> float:
    # 1 - G2² written as (t - omega - 1)/t
    return BETA * np.sqrt((t - omega - 1.0) / (t * omega))


@numba.njit(cache=True)
def _g4(omega: float, t: float) -> float:
    return GAMMA * (1.0 - omega / t)**3 / (t * (omega + 1.0))


@numba.njit(cache=True)
def _f_be(omega: float, t: float, theta: float) -> float:
    """Binary-encounter lobe, peaked at cos(theta) = G2."""
    x = (np.cos(theta) - _g2(omega, t)) / _g3(omega, t)
    return 1.0 / (1.0 + x * x)


@numba.njit(cache=True)
def _f_b(theta: float) -> float:
    """Soft-collision lobe, peaked at backscatter."""
    x = (np.cos(theta) + 1.0) / G5
    return 1.0 / (1.0 + x * x)


@numba.njit(cache=True)
def _g_be(omega: float, t: float) -> float:
    """Solid-angle integral of the binary-encounter lobe."""
    g2 = _g2(omega, t)
    g3 = _g3(omega, t)
    return 2.0 * np.pi * g3 * (np.arctan2(1.0 - g2, g3) + np.arctan2(1.0 + g2, g3))


@numba.njit(cache=True)
def _big_f(t: float) -> float:
    return (A1 * np.log(t) + A2 + A3 / t) / t


@numba.njit(cache=True)
def _f1(omega: float, t: float) -> float:
    term1 = 1.0 / (omega + 1.0)**N_EXP
    term2 = 1.0 / (t - omega)**N_EXP
    term3 = 1.0 / ((omega + 1.0) * (t - omega))**(N_EXP / 2.0)
    return term1 + term2 + term3


@numba.njit(cache=True)
def _g1(omega: float, t: float) -> float:
    numerator = RUDD_S * _big_f(t) * _f1(omega, t) / RYDBERG_EV
    denom = _g_be(omega, t) + _g4(omega, t) * G_B
    return numerator / denom


@numba.njit(cache=True)
def rudd_single_diff(W: float, E: float) -> float:
    """
    Rudd 1991 single differential cross-section dσ/dW.

    Parameters:
        W: Energy transfer [eV], 0 < W < E - R
        E: Incident kinetic energy [eV]

    Returns:
        dσ/dW [m²/eV]
    """
    omega = W / RYDBERG_EV
    t = E / RYDBERG_EV
    return _g1(omega, t) * (_g_be(omega, t) + _g4(omega, t) * G_B)


@numba.njit(cache=True)
def rudd_double_diff(W: float, theta: float, E: float) -> float:
    """
    Rudd 1991 double differential cross-section d²σ/(dW dΩ).

    Parameters:
        W: Energy transfer [eV], 0 < W < E - R
        theta: Secondary emission angle [rad]
        E: Incident kinetic energy [eV]

    Returns:
        d²σ/(dW dΩ) [m²/eV/sr]
    """
    omega = W / RYDBERG_EV
    t = E / RYDBERG_EV
    return _g1(omega, t) * (_f_be(omega, t, theta) + _g4(omega, t) * _f_b(theta))


@numba.njit(cache=True)
def rudd_angular_shape(W: float, theta: float, E: float) -> float:
    """Unnormalised angular distribution f_BE + G4 f_b."""
    omega = W / RYDBERG_EV
    t = E / RYDBERG_EV
    return _f_be(omega, t, theta) + _g4(omega, t) * _f_b(theta)


@numba.njit(cache=True)
def rudd_single_diff_table(W: np.ndarray, E: float) -> np.ndarray:
    out = np.empty(W.shape[0], dtype=np.float64)
    for i in range(W.shape[0]):
        out[i] = rudd_single_diff(W[i], E)
    return out


@numba.njit(cache=True)
def rudd_double_diff_table(W: float, theta: np.ndarray, E: float) -> np.ndarray:
    out = np.empty(theta.shape[0], dtype=np.float64)
    for i in range(theta.shape[0]):
        out[i] = rudd_double_diff(W, theta[i], E)
    return out


@numba.njit(cache=True)
def rudd_angular_table(W: float, theta: np.ndarray, E: float) -> np.ndarray:
    out = np.empty(theta.shape[0], dtype=np.float64)
    for i in range(theta.shape[0]):
        out[i] = rudd_angular_shape(W, theta[i], E)
    return out


# ============================================================================
# Closed-form CDFs (validation of the discretised sampler)
# ============================================================================

@numba.njit(cache=True)
def _one_minus_pow(x: float, p: float) -> float:
    """1 - x**p without cancellation for x near 1."""
    return -np.expm1(p * np.log(x))


@numba.njit(cache=True)
def cdf_energy_transfer(omega: float, t: float) -> float:
    """
    Closed-form antiderivative of the Rudd f1 energy-transfer shape.

    Normalised over the lower half of the allowed range,
    omega in [0, (t - 1)/2].

    Parameters:
        omega: Reduced energy transfer W/R
        t: Reduced incident energy E/R

    Returns:
        Cumulative fraction (0 at omega = 0)
    """
    n = N_EXP
    # (t - omega)^(1-n) - t^(1-n), factored to survive omega -> 0
    tail = t**(1.0 - n) * np.expm1((1.0 - n) * np.log1p(-omega / t))
    term1 = (-np.expm1((1.0 - n) * np.log1p(omega)) + tail) / (n - 1.0)
    scale = (2.0 / (t + 1.0))**(n / 2.0)
    term2 = (2.0 / (n - 2.0)) * scale * -np.expm1((1.0 - n / 2.0) * np.log1p(omega))
    g_1 = (_one_minus_pow(t, 1.0 - n) / (n - 1.0)
           - scale * _one_minus_pow(t, 1.0 - n / 2.0) / (n - 2.0))
    return 0.5 * (term1 - term2) / g_1


@numba.njit(cache=True)
def cdf_angle(omega: float, t: float, theta: float) -> float:
    """
    Fraction of the Rudd angular distribution emitted between 0 and theta.

    Solid-angle integral of f_BE + G4 f_b from 0 to theta, divided by its
    value over the full sphere (g_BE + G4 G_B).

    Parameters:
        omega: Reduced energy transfer W/R
        t: Reduced incident energy E/R
        theta: Emission angle [rad]

    Returns:
        Cumulative fraction (0 at theta = 0)
    """
    g2 = _g2(omega, t)
    g3 = _g3(omega, t)
    g4 = _g4(omega, t)
    half_versine = 2.0 * np.sin(0.5 * theta)**2  # 1 - cos(theta)
    cos_theta = np.cos(theta)

    # atan(y) - atan(x) = atan2(y - x, 1 + xy)
    x = (cos_theta - g2) / g3
    y = (1.0 - g2) / g3
    binary = 2.0 * np.pi * g3 * np.arctan2(half_versine / g3, 1.0 + x * y)

    a = 2.0 / G5
    b = (1.0 + cos_theta) / G5
    soft = 2.0 * np.pi * G5 * np.arctan2(half_versine / G5, 1.0 + a * b)

    return (binary + g4 * soft) / (_g_be(omega, t) + g4 * G_B)


# ============================================================================
# Kim 1994 kernels (omega = W/B, t = E/B, u = U/B)
# ============================================================================

@numba.njit(cache=True)
def _kim_d(t: float, N: float, coeffs: np.ndarray) -> float:
    """Dipole oscillator strength integral D(t)."""
    t_term = (t + 1.0) / 2.0
    total = 0.0
    for k in range(coeffs.shape[0]):
        p = k + 2.0
        total += (coeffs[k] / p) * (1.0 - t_term**(-p))
    return total / N


@numba.njit(cache=True)
def diff_oscillator_strength(omega: float, coeffs: np.ndarray) -> float:
    """Differential oscillator strength df/dω = Σ c_k/(ω+1)^(k+2)."""
    total = 0.0
    for k in range(coeffs.shape[0]):
        total += coeffs[k] / (omega + 1.0)**(k + 2.0)
    return total


@numba.njit(cache=True)
def kim_total(E: float, B: float, U: float, N: float, Ni: float,
              coeffs: np.ndarray, S: float) -> float:
    t = E / B
    u = U / B
    log_t = np.log(t)
    prefac = S / (t + u + 1.0)
    return prefac * (_kim_d(t, N, coeffs) * log_t
                     + (2.0 - Ni / N) * ((t - 1.0) / t - log_t / (t + 1.0)))


@numba.njit(cache=True)
def kim_single_diff(W: float, E: float, B: float, U: float, N: float, Ni: float,
                    coeffs: np.ndarray, S: float) -> float:
    t = E / B
    u = U / B
    omega = W / B
    prefac = S / (B * (t + u + 1.0))
    term1 = (Ni / N - 2.0) / (t + 1.0) * (1.0 / (omega + 1.0) + 1.0 / (t - omega))
    term2 = (2.0 - Ni / N) * (1.0 / (omega + 1.0)**2 + 1.0 / (t - omega)**2)
    term3 = np.log(t) / (N * (omega + 1.0)) * diff_oscillator_strength(omega, coeffs)
    return prefac * (term1 + term2 + term3)


@numba.njit(cache=True)
def kim_single_diff_table(W: np.ndarray, E: float, B: float, U: float, N: float,
                          Ni: float, coeffs: np.ndarray, S: float) -> np.ndarray:
    out = np.empty(W.shape[0], dtype=np.float64)
    for i in range(W.shape[0]):
        out[i] = kim_single_diff(W[i], E, B, U, N, Ni, coeffs, S)
    return out


# ============================================================================
# Model interface
# ============================================================================

class CrossSectionModel(ABC):
    """
    Capability interface shared by the model families.

    Every method is a pure function of its arguments and the species
    record captured at construction.
    """

    calc_type: CalcType = None

    def __init__(self, species: Union[Species, str]):
        self.params: SpeciesParameters = get_species_parameters(species)

    @property
    def species(self) -> Species:
        return self.params.species

    @property
    @abstractmethod
    def threshold_energy(self) -> float:
        """Incident energies at or below this value [eV] are rejected."""

    @property
    def binding_energy(self) -> float:
        """Binding energy B in E1' = E - W - B [eV]; equal to the ionisation threshold."""
        return self.threshold_energy

    @abstractmethod
    def total_cross_section(self, E: float) -> float:
        """Total ionisation cross-section [m²]."""

    @abstractmethod
    def single_diff_table(self, W: np.ndarray, E: float) -> np.ndarray:
        """dσ/dW [m²/eV] at each energy transfer in W."""

    @abstractmethod
    def double_diff_table(self, W: float, theta: np.ndarray, E: float) -> np.ndarray:
        """d²σ/(dW dΩ) [m²/eV/sr] at each angle in theta."""

    def single_diff_cross_section(self, W: float, E: float) -> float:
        return float(self.single_diff_table(np.array([W], dtype=np.float64), E)[0])

    def double_diff_cross_section(self, W: float, theta: float, E: float) -> float:
        return float(self.double_diff_table(W, np.array([theta], dtype=np.float64), E)[0])

    def energy_transfer_domain(self, E: float) -> Tuple[float, float]:
        """
        Energy transfer sampling domain [eV].

        Upper half of the kinematically allowed range: the ejected
        particle is labelled "secondary" by convention.
        """
        w_max = E - self.threshold_energy
        return 0.5 * w_max, w_max

    def angular_density(self, W: float, theta: np.ndarray, E: float) -> np.ndarray:
        """Unnormalised density of the secondary emission angle."""
        return rudd_angular_table(float(W), _as_float_array(theta), float(E))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(species={self.species.value})"


class Rudd1991Model(CrossSectionModel):
    """
    Rudd 1991 model.

    The formulas are written in Rydberg units and do not depend on the
    species. The Rydberg energy also plays the role of the binding energy,
    both for the sampling domain and for the scattered-primary kinematics.
    """

    calc_type = CalcType.RUDD1991

    @property
    def threshold_energy(self) -> float:
        return RYDBERG_EV

    def total_cross_section(self, E: float) -> float:
        U = E / RYDBERG_EV
        return 1.3 * np.pi * A0**2 * (np.log(U) + 4.0) / U

    def single_diff_table(self, W: np.ndarray, E: float) -> np.ndarray:
        return rudd_single_diff_table(_as_float_array(W), float(E))

    def single_diff_cross_section(self, W: float, E: float) -> float:
        return float(rudd_single_diff(float(W), float(E)))

    def double_diff_table(self, W: float, theta: np.ndarray, E: float) -> np.ndarray:
        return rudd_double_diff_table(float(W), _as_float_array(theta), float(E))

    def double_diff_cross_section(self, W: float, theta: float, E: float) -> float:
        return float(rudd_double_diff(float(W), float(theta), float(E)))

    def angular_density(self, W: float, theta: np.ndarray, E: float) -> np.ndarray:
        return self.double_diff_table(W, theta, E)


class Kim1994Model(CrossSectionModel):
    """
    Kim-Rudd binary-encounter-dipole model.

    Only total and single differential cross-sections exist in this
    family. Emission angles are drawn from the Rudd angular lobes.
    """

    calc_type = CalcType.KIM1994

    def __init__(self, species: Union[Species, str]):
        super().__init__(species)
        p = self.params
        self.S = BOHR_XSEC * p.N * (RYDBERG_EV / p.B)**2
        self._coeffs = p.coeff_array

    @property
    def threshold_energy(self) -> float:
        return self.params.B

    def _args(self):
        p = self.params
        return p.B, p.U, p.N, p.Ni, self._coeffs, self.S

    def total_cross_section(self, E: float) -> float:
        return float(kim_total(float(E), *self._args()))

    def single_diff_table(self, W: np.ndarray, E: float) -> np.ndarray:
        return kim_single_diff_table(_as_float_array(W), float(E), *self._args())

    def single_diff_cross_section(self, W: float, E: float) -> float:
        return float(kim_single_diff(float(W), float(E), *self._args()))

    def double_diff_table(self, W: float, theta: np.ndarray, E: float) -> np.ndarray:
        raise UnsupportedModelError(
            "Double differential cross-section is not defined for Kim1994"
        )

    def dipole_integral(self, E: float) -> float:
        """Oscillator strength integral D(t) at t = E/B."""
        return float(_kim_d(float(E) / self.params.B, self.params.N, self._coeffs))

    def diff_oscillator_strength(self, W: float) -> float:
        """df/dω at ω = W/B."""
        return float(diff_oscillator_strength(float(W) / self.params.B, self._coeffs))


_MODELS = {
    CalcType.RUDD1991: Rudd1991Model,
    CalcType.KIM1994: Kim1994Model,
}


def resolve_calc_type(calc_type: Union[CalcType, str]) -> CalcType:
    """
    Convert a CalcType or its string value into a CalcType.

    Raises:
        UnsupportedModelError: If the value names no known model family
    """
    if isinstance(calc_type, CalcType):
        return calc_type
    try:
        return CalcType(calc_type)
    except ValueError:
        raise UnsupportedModelError(
            f"Calculation type not recognised: {calc_type!r}. "
            f"Available: {[c.value for c in CalcType]}"
        ) from None


def create_cross_section_model(calc_type: Union[CalcType, str],
                               species: Union[Species, str]) -> CrossSectionModel:
    """
    Build the cross-section model for a (calc type, species) pair.

    Raises:
        UnsupportedModelError: If either selector is not supported
    """
    key = resolve_calc_type(calc_type)
    model_cls = _MODELS.get(key)
    if model_cls is None:
        raise UnsupportedModelError(f"No model registered for {key.value}")
    model = model_cls(species)
    logger.debug("Selected %r", model)
    return model


def _as_float_array(values) -> np.ndarray:
    return np.ascontiguousarray(np.atleast_1d(values), dtype=np.float64)
