"""Physics module: Cross-sections, sampling, kinematics."""

from inelastic_mc.physics.cross_sections import (
    CalcType,
    CrossSectionModel,
    Kim1994Model,
    Rudd1991Model,
    create_cross_section_model,
)
from inelastic_mc.physics.inelastic import InelasticScatter, SampledEvent

__all__ = [
    "CalcType",
    "CrossSectionModel",
    "Rudd1991Model",
    "Kim1994Model",
    "create_cross_section_model",
    "InelasticScatter",
    "SampledEvent",
]
