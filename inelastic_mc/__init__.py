"""
inelastic_mc: Ionising collisions of charged particles in gas targets

Analytic cross-sections (Rudd 1991, Kim-Rudd 1994) and Monte Carlo
sampling of energy transfer, emission angle and scattered-primary
kinematics for H, He and H2 targets.

Modules:
    core: Species parameters, shared scatter state
    physics: Cross-section models, samplers, kinematics
    generation: Batch event generation
    config: YAML defaults and sampling settings
"""

__version__ = "0.1.0"

from inelastic_mc.core.species import Species, SpeciesParameters, get_species_parameters
from inelastic_mc.core.base_scatter import BaseScatter
from inelastic_mc.physics.cross_sections import CalcType, create_cross_section_model
from inelastic_mc.physics.inelastic import InelasticScatter, SampledEvent
from inelastic_mc.generation.event_generator import EventBatch, EventGenerator
from inelastic_mc.exceptions import (
    BelowThresholdError,
    ConfigurationError,
    DegenerateDistributionError,
    InelasticScatterError,
    NonPhysicalKinematicsError,
    UnsupportedModelError,
)

__all__ = [
    "Species",
    "SpeciesParameters",
    "get_species_parameters",
    "BaseScatter",
    "CalcType",
    "create_cross_section_model",
    "InelasticScatter",
    "SampledEvent",
    "EventBatch",
    "EventGenerator",
    "InelasticScatterError",
    "UnsupportedModelError",
    "DegenerateDistributionError",
    "NonPhysicalKinematicsError",
    "BelowThresholdError",
    "ConfigurationError",
]
