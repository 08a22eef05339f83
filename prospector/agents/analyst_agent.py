"""Analyst Agent - Deep enrichment of a single lead."""

from typing import Any, Callable, Dict, Optional

from ..config import Settings
from ..models.leads import EnrichedProfile, IndividualLead, LeadRecord, SocialLinks
from ..prompts.templates import ENRICHMENT_SYSTEM_PROMPT
from ..services.deepseek_service import DeepSeekService
from ..services.tavily_service import TavilyService
from .base_agent import EnrichmentAgent


class MockAnalystAgent(EnrichmentAgent):
    """Mock Analyst Agent for UI testing without API calls."""

    async def enrich(
        self,
        lead: LeadRecord,
        product_context: Optional[str],
        credential: str
    ) -> Optional[EnrichedProfile]:
        """Return a canned profile derived from the lead's own fields."""
        self.report_progress(f"Analyzing {lead.name}...")
        offer = product_context or "our offer"
        contact = lead.contacts[0].name if lead.contacts else "there"

        return EnrichedProfile(
            key_insights=[
                f"{lead.name} operates in {lead.classification or 'an adjacent market'}",
                f"Based in {lead.locale or 'an unspecified region'}",
                lead.summary or "No public summary available",
            ],
            products_services=["Core services"],
            technologies=["Website CMS"] if lead.source_url else [],
            competitive_advantage="Local presence and a focused offer",
            target_market=lead.locale or "General",
            pitch_strategy=f"Lead with how {offer} removes a day-to-day bottleneck.",
            outreach_message=(
                f"Hi {contact}, I came across {lead.name} and thought {offer} "
                "could help. Open to a quick chat next week?"
            ),
            social_links=SocialLinks(linkedin=getattr(lead, "linkedin_url", None)),
        )


class AnalystAgent(EnrichmentAgent):
    """Production Analyst Agent using the DeepSeek reasoning model."""

    def __init__(
        self,
        settings: Settings,
        tavily_service: Optional[TavilyService] = None,
        on_progress: Optional[Callable[[str], None]] = None
    ):
        super().__init__(on_progress)
        self.settings = settings
        if tavily_service is None and settings.tavily_api_key:
            tavily_service = TavilyService(settings.tavily_api_key)
        self.tavily = tavily_service

    async def _research(self, lead: LeadRecord) -> str:
        if self.tavily is None:
            return ""
        if isinstance(lead, IndividualLead):
            query = f"{lead.handle} {lead.name} {lead.classification}"
        else:
            query = f"{lead.name} {lead.source_url} company products"
        results = await self.tavily.search(query, max_results=5, search_depth="basic")
        return TavilyService.format_results(results)

    def _build_prompt(self, lead: LeadRecord, product_context: Optional[str], search_context: str) -> str:
        contacts = "; ".join(
            f"{c.name} ({c.title})" if c.title else c.name for c in lead.contacts
        )
        return ENRICHMENT_SYSTEM_PROMPT.format(
            name=lead.name,
            source_url=lead.source_url or "N/A",
            classification=lead.classification or "N/A",
            locale=lead.locale or "N/A",
            summary=lead.summary or "N/A",
            contacts=contacts or "None known",
            product_context=product_context or "Not specified",
            search_context=search_context or "None",
        )

    async def enrich(
        self,
        lead: LeadRecord,
        product_context: Optional[str],
        credential: str
    ) -> Optional[Dict[str, Any]]:
        """
        Analyze one lead with the reasoning model.

        Returns:
            The raw profile dict, or None when the model returned nothing usable
        """
        self.report_progress(f"Analyzing {lead.name} with reasoning model...")
        deepseek = DeepSeekService(
            credential,
            reasoning_model=self.settings.reasoning_model,
            drafting_model=self.settings.drafting_model,
        )

        search_context = await self._research(lead)
        prompt = self._build_prompt(lead, product_context, search_context)
        user_prompt = f"Build the strategic profile for {lead.name}."

        profile_data = await deepseek.call_json(
            system_prompt=prompt,
            user_prompt=user_prompt,
            reasoning=True,
        )

        if isinstance(profile_data, list):
            profile_data = profile_data[0] if profile_data else None
        if not isinstance(profile_data, dict) or not profile_data:
            print(f"[Analyst] No usable profile for {lead.name}", flush=True)
            return None
        return profile_data
