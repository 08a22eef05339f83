"""Data models for lead management."""

from .leads import (
    ORGANIZATION,
    INDIVIDUAL,
    CampaignMode,
    EnrichmentStatus,
    Contact,
    SocialLinks,
    EnrichedProfile,
    LeadRecord,
    OrganizationLead,
    IndividualLead,
    Lead,
)
from .search import (
    COUNT_OPTIONS,
    LANGUAGE_OPTIONS,
    OrganizationSearch,
    IndividualSearch,
    SearchRequest,
    search_request_adapter,
)
from .pipeline_state import (
    RunPhase,
    Severity,
    LogEvent,
    PipelineRun,
    RunOutcome,
    EnrichmentOutcome,
)

__all__ = [
    "ORGANIZATION",
    "INDIVIDUAL",
    "CampaignMode",
    "EnrichmentStatus",
    "Contact",
    "SocialLinks",
    "EnrichedProfile",
    "LeadRecord",
    "OrganizationLead",
    "IndividualLead",
    "Lead",
    "COUNT_OPTIONS",
    "LANGUAGE_OPTIONS",
    "OrganizationSearch",
    "IndividualSearch",
    "SearchRequest",
    "search_request_adapter",
    "RunPhase",
    "Severity",
    "LogEvent",
    "PipelineRun",
    "RunOutcome",
    "EnrichmentOutcome",
]
