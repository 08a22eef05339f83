"""The single owned run context the presentation layer talks to."""

from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Optional, Union

from ..agents.base_agent import DiscoveryAgent, EnrichmentAgent
from ..config import Settings
from ..models.leads import LeadRecord
from ..models.pipeline_state import EnrichmentOutcome, LogEvent, PipelineRun, RunOutcome, RunPhase
from ..models.search import OrganizationSearch, SearchRequest
from .enrichment import EnrichmentCoordinator
from .event_log import EventLog
from .lead_store import LeadStore
from .orchestrator import PipelineOrchestrator, StreamItem
from .progress import ProgressSnapshot, compute_progress


class PipelineSession:
    """
    Owns the active run, its lead store and its event log.

    ``generation`` increases on every reset. Work started under an older
    generation checks it after each await and drops its results instead of
    writing into the fresh state.
    """

    def __init__(
        self,
        discovery_agent: DiscoveryAgent,
        enrichment_agent: EnrichmentAgent,
        settings: Optional[Settings] = None,
        on_event: Optional[Callable[[LogEvent], None]] = None
    ):
        self.settings = settings or Settings.from_env()
        self.generation = 0
        self.run = PipelineRun()
        self.store = LeadStore()
        self.log = EventLog(on_append=on_event)
        self.orchestrator = PipelineOrchestrator(self, discovery_agent)
        self.coordinator = EnrichmentCoordinator(self, enrichment_agent)

    def reconfigure(
        self,
        settings: Settings,
        discovery_agent: Optional[DiscoveryAgent] = None,
        enrichment_agent: Optional[EnrichmentAgent] = None
    ) -> None:
        """Swap settings (and optionally agents) without touching leads or events."""
        self.settings = settings
        if discovery_agent is not None:
            self.orchestrator.agent = discovery_agent
        if enrichment_agent is not None:
            self.coordinator.agent = enrichment_agent
        # Pick up a new concurrency limit on the next batch
        self.coordinator.reset_gate()

    @property
    def phase(self) -> RunPhase:
        return self.run.phase

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def start(self, request: Union[SearchRequest, Dict[str, Any]]) -> AsyncIterator[StreamItem]:
        """Begin discovery; see PipelineOrchestrator.start."""
        return self.orchestrator.start(request)

    async def run_discovery(self, request: Union[SearchRequest, Dict[str, Any]]) -> RunOutcome:
        """Begin discovery and wait for its terminal outcome."""
        return await self.orchestrator.run(request)

    def default_product_context(self) -> Optional[str]:
        """The product context of the active request, used when enrich() gets none."""
        if isinstance(self.run.request, OrganizationSearch):
            return self.run.request.product_context
        return None

    async def enrich(self, lead_id: str, product_context: Optional[str] = None) -> EnrichmentOutcome:
        if product_context is None:
            product_context = self.default_product_context()
        return await self.coordinator.enrich(lead_id, product_context)

    async def enrich_many(
        self,
        lead_ids: Iterable[str],
        product_context: Optional[str] = None
    ) -> List[EnrichmentOutcome]:
        if product_context is None:
            product_context = self.default_product_context()
        return await self.coordinator.enrich_many(lead_ids, product_context)

    def reset(self) -> None:
        """Return to idle, clearing leads and events and invalidating in-flight work."""
        self.generation += 1
        self.store.clear()
        self.log.clear()
        self.run = PipelineRun()
        print(f"[Pipeline] Session reset (generation {self.generation})")

    def leads(self) -> List[LeadRecord]:
        return self.store.all()

    def events(self) -> List[LogEvent]:
        return self.log.all()

    def progress(self) -> ProgressSnapshot:
        return compute_progress(self.store, self.run.target_count)
