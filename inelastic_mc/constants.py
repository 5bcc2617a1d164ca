"""
Physical constants shared by the cross-section models.

CODATA 2018 values.
"""

import numpy as np

# Bohr radius [m]
A0 = 5.29177210903e-11

# Rydberg energy [eV]
RYDBERG_EV = 13.605693122994

# Cross-section of the Bohr orbit, 4π a0² [m²]
BOHR_XSEC = 4.0 * np.pi * A0**2
