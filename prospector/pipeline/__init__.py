"""Discovery and enrichment pipeline core."""

from .event_log import EventLog
from .lead_store import LeadStore
from .progress import ProgressSnapshot, compute_progress, round_half_up
from .orchestrator import PipelineOrchestrator, parse_request, describe_request, coerce_candidate
from .enrichment import EnrichmentCoordinator, coerce_profile
from .session import PipelineSession

__all__ = [
    "EventLog",
    "LeadStore",
    "ProgressSnapshot",
    "compute_progress",
    "round_half_up",
    "PipelineOrchestrator",
    "parse_request",
    "describe_request",
    "coerce_candidate",
    "EnrichmentCoordinator",
    "coerce_profile",
    "PipelineSession",
]
