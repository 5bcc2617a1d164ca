"""
Final-state kinematics of the scattered primary.

Energy conservation:    E1 = E1' + W + B
Momentum triangle:      cos(θ1') = (E1 + E1' - W) / (2 sqrt(E1 E1'))

With W in the upper half range [(E - B)/2, E - B] the numerator is
2 E1' + B, so cos(θ1') <= 1 has solutions only for E > 2B.
"""

import math

from inelastic_mc.exceptions import NonPhysicalKinematicsError


def scattered_primary_energy(E: float, W: float, B: float) -> float:
    """
    Residual kinetic energy of the primary, E1' = E - W - B.

    No validation: W < E - B is the caller's responsibility.

    Parameters:
        E: Incident kinetic energy [eV]
        W: Energy transferred to the secondary [eV]
        B: Binding energy of the target [eV]

    Returns:
        E1' [eV]
    """
    return E - W - B


def scattered_primary_angle(E: float, W: float, B: float) -> float:
    """
    Scattering angle of the primary from the momentum triangle.

    Parameters:
        E: Incident kinetic energy [eV]
        W: Energy transferred to the secondary [eV]
        B: Binding energy of the target [eV]

    Returns:
        θ1' [rad]

    Raises:
        NonPhysicalKinematicsError: If E1' <= 0 or |cos θ1'| > 1
    """
    E1_prime = scattered_primary_energy(E, W, B)
    if not E1_prime > 0.0:
        raise NonPhysicalKinematicsError(
            f"Scattered primary energy E1'={E1_prime:.6g} eV is not positive "
            f"(E={E:.6g}, W={W:.6g}, B={B:.6g})"
        )

    cos_theta = (E + E1_prime - W) / (2.0 * math.sqrt(E * E1_prime))
    if not -1.0 <= cos_theta <= 1.0:
        raise NonPhysicalKinematicsError(
            f"cos(theta1')={cos_theta:.6g} outside [-1, 1] "
            f"(E={E:.6g}, W={W:.6g}, E1'={E1_prime:.6g})"
        )
    return math.acos(cos_theta)


def minimum_event_energy(B: float) -> float:
    """
    Incident energy [eV] at or below which no energy transfer in the upper
    half range admits a physical primary angle.
    """
    return 2.0 * B
