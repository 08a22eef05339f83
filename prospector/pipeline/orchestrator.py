"""Discovery run driver: batch in, ordered incremental commit out."""

import asyncio
import uuid
from typing import TYPE_CHECKING, Any, AsyncIterator, Dict, List, Union

from pydantic import TypeAdapter, ValidationError

from ..agents.base_agent import Candidate, DiscoveryAgent
from ..exceptions import DiscoveryError, RequestValidationError, RunStateError
from ..models.leads import EnrichmentStatus, Lead, LeadRecord, ORGANIZATION
from ..models.pipeline_state import LogEvent, PipelineRun, RunOutcome, RunPhase
from ..models.search import IndividualSearch, OrganizationSearch, SearchRequest, search_request_adapter

if TYPE_CHECKING:
    from .session import PipelineSession

StreamItem = Union[LeadRecord, LogEvent, RunOutcome]

_lead_adapter: TypeAdapter = TypeAdapter(Lead)


class _StaleRun(Exception):
    """The session was reset while this run was still in flight."""


def parse_request(request: Union[SearchRequest, Dict[str, Any]]) -> SearchRequest:
    """Validate a request (model or raw form values) into a SearchRequest."""
    if isinstance(request, (OrganizationSearch, IndividualSearch)):
        request = request.model_dump()
    try:
        return search_request_adapter.validate_python(request)
    except ValidationError as e:
        first = e.errors()[0]
        loc = [str(part) for part in first.get("loc", ())]
        # Discriminated unions prefix the location with the mode tag
        field = ".".join(loc[1:] if len(loc) > 1 else loc) or None
        raise RequestValidationError(first.get("msg", "Invalid search request"), field) from e


def describe_request(request: SearchRequest, run_id: str) -> List[str]:
    """Milestone messages announcing the configured query."""
    noun = "companies" if request.mode == ORGANIZATION else "prospects"
    messages = [
        f"Initializing discovery pipeline (run {run_id[:8]})...",
        f'Loading {request.mode} search configuration for "{request.subject}" in "{request.location}"',
        f"Target: {request.count} {noun}, output language {request.language}",
    ]
    refinements = request.refinements
    if "product_context" in refinements:
        messages.append(f'Contextualizing for product: "{refinements["product_context"]}"')
    if "target_role" in refinements:
        messages.append(f'Targeting decision maker role: "{refinements["target_role"]}"')
    if "keywords" in refinements:
        messages.append(f'Applying specific criteria: "{refinements["keywords"]}"')
    return messages


def coerce_candidate(raw: Candidate, request: SearchRequest, position: int) -> LeadRecord:
    """
    Turn one discovery candidate into a fresh lead for this run.

    Raises:
        DiscoveryError: If the candidate cannot be read as a lead of the run's mode
    """
    if isinstance(raw, LeadRecord):
        if raw.mode != request.mode:
            raise DiscoveryError(
                f"Candidate #{position} is a {raw.mode} lead in a {request.mode} campaign"
            )
        if raw.enrichment_status != EnrichmentStatus.NEW:
            raw = raw.with_enrichment(EnrichmentStatus.NEW)
        return raw

    if not isinstance(raw, dict):
        raise DiscoveryError(f"Candidate #{position} is not a lead record: {type(raw).__name__}")

    data = dict(raw)
    data["mode"] = request.mode
    data["enrichment_status"] = EnrichmentStatus.NEW
    data.pop("enriched_data", None)
    if not data.get("id"):
        data["id"] = str(uuid.uuid4())
    try:
        return _lead_adapter.validate_python(data)
    except ValidationError as e:
        raise DiscoveryError(f"Malformed candidate #{position}: {e.errors()[0].get('msg')}") from e


async def _iterate(result) -> AsyncIterator[Candidate]:
    for candidate in result:
        yield candidate


async def _bounded(stream, timeout: float) -> AsyncIterator[Candidate]:
    """Re-yield ``stream``, raising TimeoutError if a candidate takes longer than ``timeout``."""
    iterator = stream.__aiter__()
    while True:
        try:
            candidate = await asyncio.wait_for(iterator.__anext__(), timeout=timeout)
        except StopAsyncIteration:
            return
        yield candidate


class PipelineOrchestrator:
    """
    Drives one discovery run end-to-end.

    ``start`` validates synchronously, claims the run and returns an async
    stream of committed leads, log events and finally a RunOutcome. Every
    write is preceded by a generation check so a reset session never sees
    results from the run it abandoned.
    """

    def __init__(self, session: "PipelineSession", agent: DiscoveryAgent):
        self.session = session
        self.agent = agent

    def start(self, request: Union[SearchRequest, Dict[str, Any]]) -> AsyncIterator[StreamItem]:
        """
        Begin a discovery run.

        Raises:
            ConfigurationError: If no credential is configured
            RequestValidationError: If the request is malformed
            RunStateError: If the current run is not idle
        """
        credential = self.session.settings.require_credential()
        request = parse_request(request)

        run = self.session.run
        if run.phase != RunPhase.IDLE:
            raise RunStateError(run.phase.value, RunPhase.INITIALIZING.value)

        run.request = request
        run.target_count = request.count
        run.advance(RunPhase.INITIALIZING)
        print(f"[Pipeline] Run {run.run_id[:8]} started: {request.mode} / {request.subject} / {request.location}")
        return self._stream(run, request, credential, self.session.generation)

    async def run(self, request: Union[SearchRequest, Dict[str, Any]]) -> RunOutcome:
        """Start a run and drain its stream, returning the terminal outcome."""
        stream = self.start(request)
        run_id = self.session.run.run_id
        outcome = None
        async for item in stream:
            if isinstance(item, RunOutcome):
                outcome = item
        if outcome is None:
            # The session was reset before the run finished
            return RunOutcome(run_id=run_id, phase=RunPhase.IDLE, lead_count=0)
        return outcome

    def _check(self, generation: int) -> None:
        if not self.session.is_current(generation):
            raise _StaleRun()

    async def _stream(
        self,
        run: PipelineRun,
        request: SearchRequest,
        credential: str,
        generation: int
    ) -> AsyncIterator[StreamItem]:
        log = self.session.log
        settings = self.session.settings

        try:
            self._check(generation)
            opening = [log.info(message) for message in describe_request(request, run.run_id)]
            for event in opening:
                self._check(generation)
                yield event
            self._check(generation)

            run.advance(RunPhase.DISCOVERING)
            yield log.info("Executing discovery flow: generating search queries and querying sources...")
            self._check(generation)

            error = None
            try:
                result = self.agent.discover(request, credential)
                # An async generator function hands back its stream without awaiting
                if not hasattr(result, "__aiter__"):
                    result = await asyncio.wait_for(result, timeout=settings.discovery_timeout)
                self._check(generation)
                async for item in self._commit(run, result, request, generation):
                    yield item
            except _StaleRun:
                raise
            except asyncio.TimeoutError:
                error = f"Discovery timed out after {settings.discovery_timeout:g}s"
            except Exception as e:
                error = str(e) or e.__class__.__name__

            self._check(generation)
            if error is not None:
                print(f"[Pipeline] ERROR in run {run.run_id[:8]}: {error}")
                event = log.error(f"Pipeline crashed: {error}")
                run.fail(error)
                yield event
                yield self._outcome(run)
                return

            event = log.success(
                f"Pipeline completed successfully. {len(self.session.store)} leads committed to memory."
            )
            run.advance(RunPhase.COMPLETED)
            yield event
            yield self._outcome(run)

        except _StaleRun:
            print(f"[Pipeline] Run {run.run_id[:8]} was reset; discarding its remaining results")
        except asyncio.CancelledError:
            if self.session.is_current(generation) and not run.phase.is_terminal:
                print(f"[Pipeline] Run {run.run_id[:8]} cancelled")
                log.error("Pipeline crashed: Discovery cancelled")
                run.fail("Discovery cancelled")
            raise

    async def _commit(
        self,
        run: PipelineRun,
        result,
        request: SearchRequest,
        generation: int
    ) -> AsyncIterator[StreamItem]:
        """Append candidates to the store in received order, pacing each one."""
        log = self.session.log
        store = self.session.store
        delay = self.session.settings.stream_delay

        if hasattr(result, "__aiter__"):
            candidates = _bounded(result, self.session.settings.discovery_timeout)
            run.advance(RunPhase.STREAMING)
            yield log.success("Discovery stream opened. Committing candidates as they arrive...")
        else:
            batch = list(result or [])
            if not batch:
                raise DiscoveryError("Discovery returned no candidates")
            run.advance(RunPhase.STREAMING)
            announced = [log.success(
                f"Found {len(batch)} potential candidates. Starting preliminary enrichment..."
            )]
            if len(batch) > run.target_count:
                announced.append(log.warning(
                    f"Discovery returned {len(batch)} candidates; keeping the first {run.target_count}"
                ))
                batch = batch[:run.target_count]
            for event in announced:
                self._check(generation)
                yield event
            candidates = _iterate(batch)

        position = 0
        async for raw in candidates:
            self._check(generation)
            if position >= run.target_count:
                yield log.warning(f"Target of {run.target_count} reached; ignoring further candidates")
                break
            position += 1

            lead = coerce_candidate(raw, request, position)
            store.add(lead)
            fetched = log.info(f"[{lead.name}] Fetching website metadata from {lead.source_url or 'n/a'}...")
            if lead.has_contact:
                confirmed = log.success(f"[{lead.name}] Contact identified.")
            else:
                confirmed = log.success(f"[{lead.name}] Added without direct contact details.")
            for item in (lead, fetched, confirmed):
                self._check(generation)
                yield item

            await asyncio.sleep(delay)

        self._check(generation)
        if position == 0:
            raise DiscoveryError("Discovery returned no candidates")

    def _outcome(self, run: PipelineRun) -> RunOutcome:
        return RunOutcome(
            run_id=run.run_id,
            phase=run.phase,
            lead_count=len(self.session.store),
            error=run.error,
        )
