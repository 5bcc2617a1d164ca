"""Generation module: Batch sampling of independent collisions."""

from inelastic_mc.generation.event_generator import EventBatch, EventGenerator

__all__ = ["EventBatch", "EventGenerator"]
