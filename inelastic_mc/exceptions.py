"""
Error taxonomy for inelastic scattering calculations.

All errors are local, input-dependent conditions: they are raised where
they are detected and never retried internally.
"""


class InelasticScatterError(Exception):
    """Base class for all inelastic_mc errors."""

    pass


class UnsupportedModelError(InelasticScatterError, ValueError):
    """Calculation type or species outside the supported set."""

    pass


class DegenerateDistributionError(InelasticScatterError, ValueError):
    """Sampling table has no valid probability mass."""

    pass


class NonPhysicalKinematicsError(InelasticScatterError, ArithmeticError):
    """Scattered primary energy/angle cannot satisfy the conservation laws."""

    pass


class BelowThresholdError(InelasticScatterError, ValueError):
    """Incident energy at or below the ionisation threshold of the model."""

    pass


class ConfigurationError(InelasticScatterError):
    """Raised when configuration validation fails."""

    pass
