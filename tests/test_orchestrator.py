"""
Tests for discovery runs: phase lifecycle, ordered commit, failure handling.

All discovery is served by in-process fake agents; see conftest.py.
"""

import asyncio

import pytest

from prospector.config import Settings
from prospector.exceptions import ConfigurationError, RequestValidationError, RunStateError
from prospector.models.leads import EnrichmentStatus, LeadRecord, OrganizationLead
from prospector.models.pipeline_state import LogEvent, RunOutcome, RunPhase, Severity
from prospector.pipeline.session import PipelineSession

from conftest import (
    FakeDiscoveryAgent,
    FakeEnrichmentAgent,
    StreamingDiscoveryAgent,
    drain,
    make_candidate,
    make_candidates,
    org_request,
)


# =============================================================================
# SUCCESSFUL RUNS
# =============================================================================

class TestDiscoveryCompletes:

    def test_partial_batch_completes(self, make_session):
        """7 candidates for a target of 10 → Completed, 7 leads, 70% progress."""
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(7)))

        outcome = asyncio.run(session.run_discovery(org_request(count=10)))

        assert outcome.phase == RunPhase.COMPLETED
        assert outcome.succeeded
        assert outcome.lead_count == 7
        assert len(session.store) == 7
        assert session.progress().progress_percent == 70
        assert session.phase == RunPhase.COMPLETED

    def test_commit_order_matches_discovery_order(self, make_session):
        candidates = [make_candidate(i) for i in (5, 3, 9, 1)]
        session = make_session(discovery=FakeDiscoveryAgent(candidates))

        asyncio.run(session.run_discovery(org_request()))

        assert [lead.name for lead in session.leads()] == ["Company 5", "Company 3", "Company 9", "Company 1"]

    def test_stream_yields_leads_events_then_outcome(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(2)))

        items = asyncio.run(drain(session.start(org_request())))

        assert isinstance(items[-1], RunOutcome)
        leads = [item for item in items if isinstance(item, LeadRecord)]
        events = [item for item in items if isinstance(item, LogEvent)]
        assert [lead.name for lead in leads] == ["Company 1", "Company 2"]
        # Every event the stream yields is in the log, in the same order
        assert [e.id for e in events] == [e.id for e in session.events()]

    def test_committed_leads_are_new_with_fresh_ids(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(3)))
        asyncio.run(session.run_discovery(org_request()))

        leads = session.leads()
        assert all(lead.enrichment_status == EnrichmentStatus.NEW for lead in leads)
        assert all(lead.enriched_data is None for lead in leads)
        assert len({lead.id for lead in leads}) == 3
        assert all(isinstance(lead, OrganizationLead) for lead in leads)

    def test_candidate_status_and_profile_are_reset(self, make_session):
        candidate = make_candidate(1, enrichment_status="complete", enriched_data={"key_insights": ["x"]})
        session = make_session(discovery=FakeDiscoveryAgent([candidate]))

        asyncio.run(session.run_discovery(org_request()))

        lead = session.leads()[0]
        assert lead.enrichment_status == EnrichmentStatus.NEW
        assert lead.enriched_data is None

    def test_opening_and_closing_messages(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(2)))
        asyncio.run(session.run_discovery(org_request(product_context="Ledger software")))

        messages = [e.message for e in session.events()]
        assert messages[0].startswith("Initializing discovery pipeline")
        assert 'Contextualizing for product: "Ledger software"' in messages
        assert "Found 2 potential candidates. Starting preliminary enrichment..." in messages
        assert "[Company 1] Contact identified." in messages
        assert messages[-1] == "Pipeline completed successfully. 2 leads committed to memory."
        assert session.log.errors() == []

    def test_lead_without_contact_is_logged(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent([make_candidate(1, with_contact=False)]))
        asyncio.run(session.run_discovery(org_request()))
        assert "[Company 1] Added without direct contact details." in [e.message for e in session.events()]

    def test_oversized_batch_truncated_to_target(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(12)))

        outcome = asyncio.run(session.run_discovery(org_request(count=10)))

        assert outcome.lead_count == 10
        assert [lead.name for lead in session.leads()][-1] == "Company 10"
        warnings = [e for e in session.events() if e.severity == Severity.WARNING]
        assert len(warnings) == 1
        assert session.progress().progress_percent == 100

    def test_phase_visible_during_discovery(self, make_session):
        gate = asyncio.Event()
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(1), gate=gate))
        seen = []

        async def scenario():
            task = asyncio.create_task(session.run_discovery(org_request()))
            await asyncio.sleep(0.01)
            seen.append(session.phase)
            gate.set()
            return await task

        outcome = asyncio.run(scenario())
        assert seen == [RunPhase.DISCOVERING]
        assert outcome.phase == RunPhase.COMPLETED

    def test_agent_receives_parsed_request_and_credential(self, make_session):
        agent = FakeDiscoveryAgent(make_candidates(1))
        session = make_session(discovery=agent)
        asyncio.run(session.run_discovery(org_request(subject="  Fintech  ")))

        request, credential = agent.calls[0]
        assert request.subject == "Fintech"
        assert credential == "test-key"


# =============================================================================
# STREAMED DISCOVERY
# =============================================================================

class TestStreamingDiscovery:

    def test_stream_commits_every_candidate(self, make_session):
        session = make_session(discovery=StreamingDiscoveryAgent(make_candidates(4)))
        outcome = asyncio.run(session.run_discovery(org_request()))
        assert outcome.phase == RunPhase.COMPLETED
        assert len(session.store) == 4

    def test_error_after_three_committed(self, make_session):
        """Source fails after 3 commits → Failed, 3 leads kept, one error event at the tail."""
        agent = StreamingDiscoveryAgent(make_candidates(5), fail_after=3)
        session = make_session(discovery=agent)

        outcome = asyncio.run(session.run_discovery(org_request()))

        assert outcome.phase == RunPhase.FAILED
        assert session.phase == RunPhase.FAILED
        assert len(session.store) == 3
        errors = session.log.errors()
        assert len(errors) == 1
        assert session.events()[-1] == errors[0]
        assert "upstream connection dropped" in errors[0].message
        assert outcome.error == "upstream connection dropped"

    def test_stream_stops_at_target(self, make_session):
        session = make_session(discovery=StreamingDiscoveryAgent(make_candidates(8)))
        outcome = asyncio.run(session.run_discovery(org_request(count=5)))
        assert outcome.phase == RunPhase.COMPLETED
        assert len(session.store) == 5

    def test_empty_stream_fails(self, make_session):
        session = make_session(discovery=StreamingDiscoveryAgent([]))
        outcome = asyncio.run(session.run_discovery(org_request()))
        assert outcome.phase == RunPhase.FAILED
        assert len(session.log.errors()) == 1

    def test_stalled_stream_times_out(self, make_session):
        """A stream that stops producing fails the run instead of streaming forever."""
        session = make_session(
            discovery=StreamingDiscoveryAgent(make_candidates(5), stall_after=2),
            discovery_timeout=0.05,
        )

        outcome = asyncio.run(asyncio.wait_for(session.run_discovery(org_request()), timeout=5))

        assert outcome.phase == RunPhase.FAILED
        assert outcome.error == "Discovery timed out after 0.05s"
        assert len(session.store) == 2
        errors = session.log.errors()
        assert len(errors) == 1
        assert session.events()[-1] == errors[0]


# =============================================================================
# FAILED RUNS
# =============================================================================

class TestDiscoveryFails:

    def test_service_error_fails_run(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent(error=RuntimeError("quota exceeded")))

        outcome = asyncio.run(session.run_discovery(org_request()))

        assert outcome.phase == RunPhase.FAILED
        assert len(session.store) == 0
        errors = session.log.errors()
        assert len(errors) == 1
        assert errors[0].message == "Pipeline crashed: quota exceeded"
        assert session.events()[-1] == errors[0]

    def test_empty_batch_fails_run(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent([]))
        outcome = asyncio.run(session.run_discovery(org_request()))
        assert outcome.phase == RunPhase.FAILED
        assert "no candidates" in outcome.error

    def test_malformed_candidate_fails_run(self, make_session):
        candidates = [make_candidate(1), {"name": "Bad", "quality_score": 400}]
        session = make_session(discovery=FakeDiscoveryAgent(candidates))

        outcome = asyncio.run(session.run_discovery(org_request()))

        assert outcome.phase == RunPhase.FAILED
        assert len(session.store) == 1

    def test_non_dict_candidate_fails_run(self, make_session):
        session = make_session(discovery=FakeDiscoveryAgent(["just a string"]))
        outcome = asyncio.run(session.run_discovery(org_request()))
        assert outcome.phase == RunPhase.FAILED

    def test_wrong_mode_record_fails_run(self, make_session):
        from prospector.models.leads import IndividualLead
        session = make_session(discovery=FakeDiscoveryAgent([IndividualLead(id="x", name="Reddit")]))
        outcome = asyncio.run(session.run_discovery(org_request()))
        assert outcome.phase == RunPhase.FAILED

    def test_discovery_timeout_fails_run(self, make_session):
        gate = asyncio.Event()
        session = make_session(
            discovery=FakeDiscoveryAgent(make_candidates(1), gate=gate),
            discovery_timeout=0.01,
        )

        outcome = asyncio.run(session.run_discovery(org_request()))

        assert outcome.phase == RunPhase.FAILED
        assert "timed out" in outcome.error
        assert len(session.log.errors()) == 1


# =============================================================================
# PRECONDITIONS
# =============================================================================

class TestStartPreconditions:

    def test_missing_credential_raises_without_state_change(self):
        session = PipelineSession(
            FakeDiscoveryAgent(make_candidates(1)),
            FakeEnrichmentAgent(),
            settings=Settings(deepseek_api_key="", use_mock=False),
        )
        with pytest.raises(ConfigurationError):
            session.start(org_request())
        assert session.phase == RunPhase.IDLE
        assert session.events() == []

    def test_mock_mode_supplies_credential(self):
        agent = FakeDiscoveryAgent(make_candidates(1))
        session = PipelineSession(
            agent,
            FakeEnrichmentAgent(),
            settings=Settings(deepseek_api_key="", use_mock=True),
        )
        outcome = asyncio.run(session.run_discovery(org_request()))
        assert outcome.succeeded
        assert agent.calls[0][1] == "mock"

    def test_invalid_request_raises_without_state_change(self, make_session):
        session = make_session()
        with pytest.raises(RequestValidationError) as exc_info:
            session.start(org_request(subject=""))
        assert exc_info.value.field == "subject"
        assert session.phase == RunPhase.IDLE
        assert session.run.request is None

    def test_start_claims_run_synchronously(self, make_session):
        session = make_session()
        stream = session.start(org_request())
        assert session.phase == RunPhase.INITIALIZING
        assert session.run.target_count == 10
        asyncio.run(drain(stream))

    def test_second_start_rejected_while_active(self, make_session):
        session = make_session()
        stream = session.start(org_request())
        with pytest.raises(RunStateError):
            session.start(org_request())
        asyncio.run(drain(stream))

    def test_start_rejected_after_completion_until_reset(self, make_session):
        session = make_session()
        asyncio.run(session.run_discovery(org_request()))
        with pytest.raises(RunStateError):
            session.start(org_request())

        session.reset()
        outcome = asyncio.run(session.run_discovery(org_request()))
        assert outcome.succeeded


# =============================================================================
# CANCELLATION
# =============================================================================

class TestDiscoveryCancelled:

    def test_cancelled_drain_fails_run(self, make_session):
        gate = asyncio.Event()
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(3), gate=gate))

        async def scenario():
            task = asyncio.create_task(drain(session.start(org_request())))
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        assert session.phase == RunPhase.FAILED
        assert session.run.error == "Discovery cancelled"
        errors = session.log.errors()
        assert len(errors) == 1
        assert session.events()[-1] == errors[0]

    def test_cancel_mid_stream_keeps_committed_leads(self, make_session):
        session = make_session(discovery=StreamingDiscoveryAgent(make_candidates(5), stall_after=2))

        async def scenario():
            task = asyncio.create_task(drain(session.start(org_request())))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        assert session.phase == RunPhase.FAILED
        assert len(session.store) == 2
        assert len(session.log.errors()) == 1

    def test_cancel_after_reset_leaves_new_run_alone(self, make_session):
        gate = asyncio.Event()
        session = make_session(discovery=FakeDiscoveryAgent(make_candidates(3), gate=gate))

        async def scenario():
            task = asyncio.create_task(drain(session.start(org_request())))
            await asyncio.sleep(0.01)
            session.reset()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        assert session.phase == RunPhase.IDLE
        assert session.events() == []


# =============================================================================
# PROGRESS OVER A RUN
# =============================================================================

class TestProgressNeverDecreases:

    @staticmethod
    def _percent_after_each_lead(session, request):
        async def collect():
            percents = []
            async for item in session.start(request):
                if isinstance(item, LeadRecord):
                    percents.append(session.progress().progress_percent)
            return percents
        return asyncio.run(collect())

    @pytest.mark.parametrize("agent,count,final", [
        (FakeDiscoveryAgent(make_candidates(7)), 10, 70),
        (FakeDiscoveryAgent(make_candidates(12)), 10, 100),
        (StreamingDiscoveryAgent(make_candidates(8)), 5, 100),
    ], ids=["partial-batch", "oversized-batch", "oversized-stream"])
    def test_percent_is_monotonic(self, make_session, agent, count, final):
        session = make_session(discovery=agent)

        percents = self._percent_after_each_lead(session, org_request(count=count))

        assert percents == sorted(percents)
        assert len(percents) == min(count, len(agent.candidates))
        assert percents[-1] == final
        assert session.progress().progress_percent == final
