"""
Inelastic (ionising) scattering of a charged particle off a gas target.

Combines the cross-section model, the tabulated samplers and the
kinematics of the scattered primary behind one object whose incident
energy is updated between collisions by the event generator.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from scipy import integrate

from inelastic_mc.config.settings import SamplingConfig
from inelastic_mc.constants import RYDBERG_EV
from inelastic_mc.core.base_scatter import BaseScatter
from inelastic_mc.core.species import Species
from inelastic_mc.exceptions import BelowThresholdError, UnsupportedModelError
from inelastic_mc.physics import kinematics
from inelastic_mc.physics.cross_sections import (
    CalcType,
    CrossSectionModel,
    cdf_angle,
    cdf_energy_transfer,
    create_cross_section_model,
)
from inelastic_mc.physics.sampling import discretize, sample

logger = logging.getLogger(__name__)

ANGLE_DOMAIN = (0.0, 0.5 * np.pi)


@dataclass(frozen=True)
class SampledEvent:
    """
    One sampled ionising collision.

    Attributes:
        energy_transfer: Energy given to the secondary, W [eV]
        secondary_angle: Emission angle of the secondary, θ [rad]
        primary_energy: Primary energy after the collision, E1' [eV]
        primary_angle: Primary scattering angle, θ1' [rad]
    """
    energy_transfer: float
    secondary_angle: float
    primary_energy: float
    primary_angle: float


class InelasticScatter(BaseScatter):
    """
    Ionising collision of the incident particle with one target species.

    The cross-section family is chosen once, at construction. Each sampling
    call builds its tables from the current incident energy; nothing is
    cached between calls.

    Usage:
        scatter = InelasticScatter(temperature=0.0, calc_type='rudd1991',
                                   species='H', incident_energy=100.0, seed=1)
        sigma = scatter.total_cross_section()
        event = scatter.sample_event()
    """

    def __init__(self, temperature: float,
                 calc_type: Union[CalcType, str] = CalcType.RUDD1991,
                 species: Union[Species, str] = Species.H,
                 incident_energy: Optional[float] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 sampling: Optional[SamplingConfig] = None):
        """
        Initialize inelastic scatter.

        Parameters:
            temperature: Gas temperature [K] (unused by this scatter type)
            calc_type: Cross-section family ('rudd1991' or 'kim1994')
            species: Target species ('H', 'He' or 'H2')
            incident_energy: Incident kinetic energy [eV] (may be set later)
            rng: Generator to draw from
            seed: Seed for a new generator when rng is not given
            sampling: Bin counts for the sampling tables (defaults.yaml if None)

        Raises:
            UnsupportedModelError: If calc_type or species is not supported
        """
        # Resolve the model before touching the energy: the threshold depends on it
        self._model: CrossSectionModel = create_cross_section_model(calc_type, species)
        self.sampling = sampling if sampling is not None else SamplingConfig.from_defaults()
        super().__init__(temperature, incident_energy=incident_energy, rng=rng, seed=seed)
        logger.debug("Created %r with %s", self, self.sampling)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def model(self) -> CrossSectionModel:
        return self._model

    @property
    def calc_type(self) -> CalcType:
        return self._model.calc_type

    @property
    def species(self) -> Species:
        return self._model.species

    @property
    def binding_energy(self) -> float:
        """
        Binding energy B in E1' = E - W - B [eV].

        The Rydberg energy for Rudd1991 (the model is written in Rydberg
        units), the species binding energy for Kim1994.
        """
        return self._model.binding_energy

    @property
    def event_threshold_energy(self) -> float:
        """Incident energy [eV] at or below which sample_event cannot succeed."""
        return kinematics.minimum_event_energy(self.binding_energy)

    @property
    def threshold_energy(self) -> float:
        return self._model.threshold_energy

    def _validate_energy(self, energy_eV: float) -> float:
        energy_eV = super()._validate_energy(energy_eV)
        if energy_eV <= self._model.threshold_energy:
            raise BelowThresholdError(
                f"Incident energy {energy_eV:.6g} eV is at or below the "
                f"{self.calc_type.value} threshold {self._model.threshold_energy:.6g} eV"
            )
        return energy_eV

    # ------------------------------------------------------------------
    # Cross-sections at the current incident energy
    # ------------------------------------------------------------------

    def total_cross_section(self) -> float:
        """Total ionisation cross-section [m²]."""
        return self._model.total_cross_section(self.incident_energy)

    def single_diff_cross_section(self, W: float) -> float:
        """dσ/dW [m²/eV] for 0 < W < E - threshold."""
        return self._model.single_diff_cross_section(W, self.incident_energy)

    def double_diff_cross_section(self, W: float, theta: float) -> float:
        """d²σ/(dW dΩ) [m²/eV/sr] (Rudd1991 only)."""
        return self._model.double_diff_cross_section(W, theta, self.incident_energy)

    def integrated_double_diff(self, W: float, theta_min: float = 0.0,
                               theta_max: float = np.pi) -> float:
        """
        Solid-angle integral of d²σ/(dW dΩ) between two polar angles [m²/eV].

        Over the full sphere this reproduces dσ/dW up to the G_B
        approximation of the soft-collision lobe (< 1 %).
        """
        E = self.incident_energy
        value, _ = integrate.quad(
            lambda theta: self._model.double_diff_cross_section(W, theta, E) * np.sin(theta),
            theta_min, theta_max, limit=200,
        )
        return 2.0 * np.pi * value

    def _require_rudd(self, what: str):
        if self.calc_type is not CalcType.RUDD1991:
            raise UnsupportedModelError(
                f"{what} is a Rudd1991 closed form, not defined for {self.calc_type.value}"
            )

    def cdf_energy_transfer(self, W: float) -> float:
        """
        Closed-form Rudd energy-transfer CDF at W (lower half-range normalisation).

        Raises:
            UnsupportedModelError: On a Kim1994 instance
        """
        self._require_rudd("Energy-transfer CDF")
        return float(cdf_energy_transfer(W / RYDBERG_EV, self.incident_energy / RYDBERG_EV))

    def cdf_angle(self, W: float, theta: float) -> float:
        """
        Closed-form fraction of the Rudd angular distribution below theta.

        Raises:
            UnsupportedModelError: On a Kim1994 instance
        """
        self._require_rudd("Angular CDF")
        return float(cdf_angle(W / RYDBERG_EV, self.incident_energy / RYDBERG_EV, theta))

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def energy_transfer_table(self):
        """Tabulated dσ/dW over the energy transfer sampling domain."""
        E = self.incident_energy
        lo, hi = self._model.energy_transfer_domain(E)
        return discretize(lambda w: self._model.single_diff_table(w, E),
                          lo, hi, self.sampling.energy_transfer_bins)

    def angle_table(self, W: float):
        """Tabulated angular density of the secondary over [0, π/2]."""
        E = self.incident_energy
        lo, hi = ANGLE_DOMAIN
        return discretize(lambda theta: self._model.angular_density(W, theta, E),
                          lo, hi, self.sampling.angle_bins)

    def sample_energy_transfer(self) -> float:
        """
        Draw the energy transferred to the secondary [eV].

        Raises:
            DegenerateDistributionError: If dσ/dW is negative or non-finite
                in the sampling domain
        """
        return sample(self.energy_transfer_table(), self.rng)

    def sample_angle(self, W: float) -> float:
        """
        Draw the secondary emission angle [rad] in [0, π/2] given W.

        Raises:
            DegenerateDistributionError: If the angular density is invalid
        """
        return sample(self.angle_table(W), self.rng)

    # ------------------------------------------------------------------
    # Kinematics
    # ------------------------------------------------------------------

    def scattered_primary_energy(self, W: float) -> float:
        """E1' = E - W - B [eV]. Not validated."""
        return kinematics.scattered_primary_energy(self.incident_energy, W, self.binding_energy)

    def scattered_primary_angle(self, W: float) -> float:
        """
        Primary scattering angle [rad].

        Raises:
            NonPhysicalKinematicsError: If no physical angle exists for W
        """
        return kinematics.scattered_primary_angle(self.incident_energy, W, self.binding_energy)

    def sample_event(self) -> SampledEvent:
        """
        Sample one collision at the current incident energy.

        Raises:
            BelowThresholdError: If E <= 2B, where no W in the sampling
                domain admits a physical primary angle
            DegenerateDistributionError: If a sampling table is invalid
            NonPhysicalKinematicsError: If the sampled W admits no physical
                primary angle
        """
        E = self.incident_energy
        if E <= self.event_threshold_energy:
            raise BelowThresholdError(
                f"Incident energy {E:.6g} eV is at or below 2B = "
                f"{self.event_threshold_energy:.6g} eV: no collision in the "
                f"sampling domain conserves momentum ({self!r})"
            )
        W = self.sample_energy_transfer()
        theta = self.sample_angle(W)
        return SampledEvent(
            energy_transfer=W,
            secondary_angle=theta,
            primary_energy=self.scattered_primary_energy(W),
            primary_angle=self.scattered_primary_angle(W),
        )

    def __repr__(self) -> str:
        energy = self._incident_energy
        energy_str = f"{energy:.4g} eV" if energy is not None else "unset"
        return (f"InelasticScatter({self.calc_type.value}, {self.species.value}, "
                f"E={energy_str}, T={self.temperature:.1f} K)")


# ============================================================================
# Example Usage
# ============================================================================

if __name__ == "__main__":
    print("\n" + "="*70)
    print("Inelastic Scattering Test")
    print("="*70)

    for calc in CalcType:
        for spec in Species:
            scatter = InelasticScatter(0.0, calc, spec, incident_energy=100.0, seed=1)
            print(f"  {calc.value:9s} {spec.value:3s}: "
                  f"σ(100 eV) = {scatter.total_cross_section()*1e4:.4e} cm²")

    scatter = InelasticScatter(0.0, CalcType.RUDD1991, Species.H, incident_energy=100.0, seed=1)
    print(f"\nSampling 5 events for {scatter}:")
    for _ in range(5):
        W = scatter.sample_energy_transfer()
        theta = scatter.sample_angle(W)
        print(f"  W = {W:7.3f} eV, θ = {np.degrees(theta):6.2f}°, "
              f"E1' = {scatter.scattered_primary_energy(W):7.3f} eV")

    print("\n" + "="*70)
    print("Test complete!")
    print("="*70 + "\n")
