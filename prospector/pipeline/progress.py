"""Live metrics derived from the lead store."""

import math
from typing import Dict, Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..models.leads import EnrichmentStatus, LeadRecord


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


class ProgressSnapshot(BaseModel):
    """Metrics for one point in time. Never stored; recompute after changes."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    target_count: int = 0
    progress_percent: int = Field(0, ge=0, le=100)
    records_with_contact: int = 0
    enrichment_rate: int = Field(0, ge=0, le=100)
    status_counts: Dict[str, int] = Field(default_factory=dict)


def compute_progress(leads: Iterable[LeadRecord], target_count: int) -> ProgressSnapshot:
    """
    Derive progress metrics from a store snapshot.

    Args:
        leads: Leads in the store (a LeadStore works directly)
        target_count: How many leads the run asked for

    Returns:
        ProgressSnapshot
    """
    snapshot = list(leads)
    total = len(snapshot)

    if target_count > 0:
        progress_percent = min(100, round_half_up(100 * total / target_count))
    else:
        progress_percent = 0

    with_contact = sum(1 for lead in snapshot if lead.has_contact)
    enrichment_rate = round_half_up(100 * with_contact / total) if total else 0

    status_counts = {status.value: 0 for status in EnrichmentStatus}
    for lead in snapshot:
        status_counts[lead.enrichment_status.value] += 1

    return ProgressSnapshot(
        total=total,
        target_count=target_count,
        progress_percent=progress_percent,
        records_with_contact=with_contact,
        enrichment_rate=enrichment_rate,
        status_counts=status_counts,
    )
