"""Core module: Species parameters and shared scatter state."""

from inelastic_mc.core.species import Species, SpeciesParameters, get_species_parameters
from inelastic_mc.core.base_scatter import BaseScatter

__all__ = ["Species", "SpeciesParameters", "get_species_parameters", "BaseScatter"]
