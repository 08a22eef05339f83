"""
Shared fakes and fixtures for the pipeline tests.

The fake agents stand in for the DeepSeek-backed Scout/Analyst agents so the
tests never leave the process.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from prospector.agents.base_agent import DiscoveryAgent, EnrichmentAgent
from prospector.config import Settings
from prospector.models.leads import EnrichedProfile
from prospector.pipeline.session import PipelineSession


# =============================================================================
# FACTORIES
# =============================================================================

def make_candidate(index: int, with_contact: bool = True, **overrides) -> Dict[str, Any]:
    """Build a raw organization candidate dict as a discovery agent returns it."""
    data = {
        "name": f"Company {index}",
        "source_url": f"https://company{index}.example.com",
        "classification": "Fintech",
        "locale": "Austin",
        "summary": f"Company number {index}",
        "quality_score": 50 + index,
        "general_contact": f"info@company{index}.example.com" if with_contact else None,
    }
    data.update(overrides)
    return data


def make_candidates(count: int, with_contact: int = None) -> List[Dict[str, Any]]:
    """``count`` candidates, the first ``with_contact`` of which carry a contact."""
    if with_contact is None:
        with_contact = count
    return [make_candidate(i, with_contact=i <= with_contact) for i in range(1, count + 1)]


def org_request(count: int = 10, **overrides) -> Dict[str, Any]:
    data = {"mode": "organization", "subject": "Fintech", "location": "Austin", "count": count}
    data.update(overrides)
    return data


FULL_PROFILE = EnrichedProfile(
    key_insights=["Growing fast"],
    products_services=["Payments API"],
    pitch_strategy="Lead with compliance tooling",
    outreach_message="Hi there",
)


# =============================================================================
# FAKE AGENTS
# =============================================================================

class FakeDiscoveryAgent(DiscoveryAgent):
    """Returns a fixed batch, or raises, after an optional gate opens."""

    def __init__(self, candidates=None, error: Optional[Exception] = None, gate: asyncio.Event = None):
        super().__init__()
        self.candidates = candidates or []
        self.error = error
        self.gate = gate
        self.calls = []

    async def discover(self, request, credential):
        self.calls.append((request, credential))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.candidates)


class StreamingDiscoveryAgent(DiscoveryAgent):
    """Hands back an async stream; optionally fails after ``fail_after`` items or stalls after ``stall_after``."""

    def __init__(
        self,
        candidates,
        fail_after: Optional[int] = None,
        error: Exception = None,
        stall_after: Optional[int] = None
    ):
        super().__init__()
        self.candidates = candidates
        self.fail_after = fail_after
        self.error = error or RuntimeError("upstream connection dropped")
        self.stall_after = stall_after

    async def _stream(self):
        for i, candidate in enumerate(self.candidates):
            if self.stall_after is not None and i == self.stall_after:
                await asyncio.sleep(3600)
            if self.fail_after is not None and i == self.fail_after:
                raise self.error
            await asyncio.sleep(0)
            yield candidate
        if self.fail_after is not None and self.fail_after >= len(self.candidates):
            raise self.error

    async def discover(self, request, credential):
        return self._stream()


class FakeEnrichmentAgent(EnrichmentAgent):
    """Returns ``result`` (or raises ``error``), tracking concurrency."""

    def __init__(self, result=FULL_PROFILE, error: Optional[Exception] = None, gate: asyncio.Event = None):
        super().__init__()
        self.result = result
        self.error = error
        self.gate = gate
        self.calls = []
        self.active = 0
        self.max_active = 0

    async def enrich(self, lead, product_context, credential):
        self.calls.append((lead.id, product_context, credential))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
            if self.error is not None:
                raise self.error
            return self.result
        finally:
            self.active -= 1


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(deepseek_api_key="test-key", stream_delay=0, max_concurrent_enrichments=4)


@pytest.fixture
def make_session(settings):
    """Factory for sessions wired to fake agents."""
    def _make(discovery=None, enrichment=None, **setting_overrides) -> PipelineSession:
        session_settings = settings.model_copy(update=setting_overrides) if setting_overrides else settings
        return PipelineSession(
            discovery or FakeDiscoveryAgent(make_candidates(3)),
            enrichment or FakeEnrichmentAgent(),
            settings=session_settings,
        )
    return _make


async def drain(stream) -> list:
    """Collect every item of a discovery stream."""
    return [item async for item in stream]
