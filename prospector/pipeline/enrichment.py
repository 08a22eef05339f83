"""Per-lead enrichment lifecycle."""

import asyncio
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

from ..agents.base_agent import EnrichmentAgent
from ..exceptions import LeadNotFoundError
from ..models.leads import EnrichedProfile, EnrichmentStatus
from ..models.pipeline_state import EnrichmentOutcome

if TYPE_CHECKING:
    from .session import PipelineSession


def coerce_profile(result: Optional[Union[EnrichedProfile, Dict[str, Any]]]) -> Optional[EnrichedProfile]:
    """Normalize an agent result; None means the agent produced nothing."""
    if result is None:
        return None
    if isinstance(result, EnrichedProfile):
        return result
    return EnrichedProfile.model_validate(result)


class EnrichmentCoordinator:
    """
    Runs enrichment jobs, one per lead id at a time.

    The lead is marked ``enriching`` before any await so observers see the
    transition immediately. External calls are gated by a semaphore sized by
    ``max_concurrent_enrichments``; queued jobs keep the ``enriching`` status
    while they wait.
    """

    def __init__(self, session: "PipelineSession", agent: EnrichmentAgent):
        self.session = session
        self.agent = agent
        self._gate: Optional[asyncio.Semaphore] = None
        self._gate_loop: Optional[asyncio.AbstractEventLoop] = None

    def _semaphore(self) -> asyncio.Semaphore:
        # Streamlit drives each batch with a fresh asyncio.run(); a semaphore
        # must not outlive the loop it was first used on.
        loop = asyncio.get_running_loop()
        if self._gate is None or self._gate_loop is not loop:
            self._gate = asyncio.Semaphore(self.session.settings.max_concurrent_enrichments)
            self._gate_loop = loop
        return self._gate

    def reset_gate(self) -> None:
        self._gate = None
        self._gate_loop = None

    async def enrich(self, lead_id: str, product_context: Optional[str] = None) -> EnrichmentOutcome:
        """
        Enrich one lead.

        Args:
            lead_id: Id of a lead in the store
            product_context: What the user is selling, passed to the agent

        Returns:
            EnrichmentOutcome describing what happened

        Raises:
            ConfigurationError: If no credential is configured
            LeadNotFoundError: If the id is not in the store
        """
        session = self.session
        store = session.store
        log = session.log
        settings = session.settings

        credential = settings.require_credential()
        lead = store.by_id(lead_id)
        if lead is None:
            raise LeadNotFoundError(lead_id)

        if lead.enrichment_status == EnrichmentStatus.COMPLETE:
            log.warning(f"[{lead.name}] Data is already enriched.")
            return EnrichmentOutcome.SKIPPED
        if lead.enrichment_status == EnrichmentStatus.ENRICHING:
            log.warning(f"[{lead.name}] Enrichment is already in progress.")
            return EnrichmentOutcome.IN_FLIGHT

        generation = session.generation
        lead = store.update(lead_id, lambda l: l.with_enrichment(EnrichmentStatus.ENRICHING))
        log.info(f"Initiating deep enrichment protocol for {lead.name}...")

        profile = None
        error = None
        try:
            async with self._semaphore():
                if not session.is_current(generation):
                    return EnrichmentOutcome.STALE
                log.info(f"[{lead.name}] Scraping website content and analyzing business model...")
                result = await asyncio.wait_for(
                    self.agent.enrich(lead, product_context, credential),
                    timeout=settings.enrichment_timeout,
                )
            profile = coerce_profile(result)
        except asyncio.CancelledError:
            if session.is_current(generation):
                store.update(lead_id, lambda l: l.with_enrichment(EnrichmentStatus.FAILED))
                log.error(f"[{lead.name}] Enrichment cancelled.")
            raise
        except asyncio.TimeoutError:
            error = f"timed out after {settings.enrichment_timeout:g}s"
        except Exception as e:
            error = str(e) or e.__class__.__name__

        if not session.is_current(generation):
            print(f"[Enrichment] Discarding late result for {lead.name}; the session was reset")
            return EnrichmentOutcome.STALE

        if error is not None:
            print(f"[Enrichment] ERROR for {lead.name}: {error}")
            store.update(lead_id, lambda l: l.with_enrichment(EnrichmentStatus.FAILED))
            log.error(f"[{lead.name}] Enrichment error: {error}")
            return EnrichmentOutcome.FAILED

        if profile is None or profile.is_empty():
            store.update(lead_id, lambda l: l.with_enrichment(EnrichmentStatus.COMPLETE))
            log.error(f"[{lead.name}] Failed to generate deep insights.")
            return EnrichmentOutcome.EMPTY

        store.update(lead_id, lambda l: l.with_enrichment(EnrichmentStatus.COMPLETE, profile))
        log.success(f"[{lead.name}] Strategic analysis complete. Pitch generated.")
        return EnrichmentOutcome.ENRICHED

    async def enrich_many(
        self,
        lead_ids: Iterable[str],
        product_context: Optional[str] = None
    ) -> List[EnrichmentOutcome]:
        """Enrich several leads concurrently; outcomes follow the order of ``lead_ids``."""
        lead_ids = list(lead_ids)
        for lead_id in lead_ids:
            if lead_id not in self.session.store:
                raise LeadNotFoundError(lead_id)
        return list(await asyncio.gather(*(self.enrich(i, product_context) for i in lead_ids)))
