"""Base agent interfaces for the discovery and enrichment services."""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Callable, Dict, Optional, Sequence, Union

from ..models.leads import EnrichedProfile, LeadRecord
from ..models.search import SearchRequest

# A candidate may arrive as a finished LeadRecord or as raw fields to validate.
Candidate = Union[LeadRecord, Dict[str, Any]]


class BaseAgent(ABC):
    """Abstract base class for all agents in the Prospector pipeline."""

    def __init__(self, on_progress: Optional[Callable[[str], None]] = None):
        """
        Initialize the agent.

        Args:
            on_progress: Optional callback for progress updates
        """
        self.on_progress = on_progress

    def report_progress(self, message: str) -> None:
        """Report progress to the UI if callback is set."""
        if self.on_progress:
            self.on_progress(message)


class DiscoveryAgent(BaseAgent):
    """Turns a search request into an ordered batch of candidates."""

    @abstractmethod
    async def discover(
        self,
        request: SearchRequest,
        credential: str
    ) -> Union[Sequence[Candidate], AsyncIterator[Candidate]]:
        """
        Find candidates for ``request``.

        Args:
            request: The campaign being run
            credential: API credential for the generative service

        Returns:
            Candidates in ranked order
        """
        pass


class EnrichmentAgent(BaseAgent):
    """Deepens a single lead into a strategic profile."""

    @abstractmethod
    async def enrich(
        self,
        lead: LeadRecord,
        product_context: Optional[str],
        credential: str
    ) -> Optional[Union[EnrichedProfile, Dict[str, Any]]]:
        """
        Build a profile for one lead.

        Args:
            lead: The lead to analyse
            product_context: What the user is selling, if known
            credential: API credential for the generative service

        Returns:
            The profile, or None when nothing useful could be produced
        """
        pass
