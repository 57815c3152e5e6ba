"""Read-only reference data handed to the core as a parameter.

Loaded once per process or session and never mutated afterwards.
"""

from flowcore.models.nodes import FlowModel


class ExternalJourney(FlowModel):
    """A target flow that a start-flow node can launch."""

    model_config = {"frozen": True}

    id: str
    name: str
    steps: int = 0
    estimated_days: int = 0


class ReferenceCatalog(FlowModel):
    model_config = {"frozen": True}

    journeys: tuple[ExternalJourney, ...] = ()

    def has_journey(self, journey_id: str) -> bool:
        return any(journey.id == journey_id for journey in self.journeys)
