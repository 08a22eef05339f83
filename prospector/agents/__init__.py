"""AI agents for lead discovery and enrichment."""

from typing import Callable, Optional, Tuple

from ..config import Settings
from .base_agent import BaseAgent, Candidate, DiscoveryAgent, EnrichmentAgent
from .scout_agent import ScoutAgent, MockScoutAgent
from .analyst_agent import AnalystAgent, MockAnalystAgent


def build_agents(
    settings: Settings,
    on_progress: Optional[Callable[[str], None]] = None
) -> Tuple[DiscoveryAgent, EnrichmentAgent]:
    """Pick mock or live agents for the given settings."""
    if settings.use_mock:
        print("Using MockScoutAgent / MockAnalystAgent", flush=True)
        return MockScoutAgent(on_progress=on_progress), MockAnalystAgent(on_progress=on_progress)
    return (
        ScoutAgent(settings, on_progress=on_progress),
        AnalystAgent(settings, on_progress=on_progress),
    )


__all__ = [
    "BaseAgent",
    "Candidate",
    "DiscoveryAgent",
    "EnrichmentAgent",
    "ScoutAgent",
    "MockScoutAgent",
    "AnalystAgent",
    "MockAnalystAgent",
    "build_agents",
]
