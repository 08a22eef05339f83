"""Scout Agent - Discovers candidate leads for a campaign."""

from typing import Any, Callable, Dict, List, Optional

from ..config import Settings
from ..models.leads import Contact, IndividualLead, OrganizationLead
from ..models.search import IndividualSearch, OrganizationSearch, SearchRequest
from ..prompts.templates import INDIVIDUAL_DISCOVERY_PROMPT, ORGANIZATION_DISCOVERY_PROMPT
from ..services.deepseek_service import DeepSeekService
from ..services.tavily_service import TavilyService
from .base_agent import DiscoveryAgent

_TEXT_FIELDS = ("name", "source_url", "classification", "locale", "summary")


def _clean_candidate(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize one model-produced candidate so it validates as a lead."""
    data = dict(raw)
    # Older prompt revisions answered with company_name/website
    if not data.get("name") and data.get("company_name"):
        data["name"] = data.pop("company_name")
    if not data.get("source_url") and data.get("website"):
        data["source_url"] = data.pop("website")

    for field in _TEXT_FIELDS:
        value = data.get(field)
        data[field] = "" if value is None else str(value).strip()

    try:
        score = int(float(data.get("quality_score") or 0))
    except (TypeError, ValueError):
        score = 0
    data["quality_score"] = min(100, max(0, score))

    contacts = []
    for contact in data.get("contacts") or []:
        if not isinstance(contact, dict):
            continue
        contacts.append({
            "name": contact.get("name") or "",
            "title": contact.get("title") or "",
            "email": contact.get("email") or None,
        })
    data["contacts"] = contacts
    data.pop("id", None)
    return data


class MockScoutAgent(DiscoveryAgent):
    """Mock Scout Agent for UI testing without API calls."""

    async def discover(self, request: SearchRequest, credential: str) -> List[Dict[str, Any]]:
        """Return hardcoded mock candidates for the campaign's mode."""
        self.report_progress(f"Scouting for {request.count} leads...")

        if isinstance(request, IndividualSearch):
            mock_leads = [
                IndividualLead(
                    id="mock-ind-1",
                    name="Instagram",
                    source_url="https://instagram.com/p/mock1",
                    classification="Frustrated with current option",
                    locale=request.location,
                    summary=f"Does anyone know a good {request.subject} near me? Mine just closed.",
                    quality_score=88,
                    posted_at="2 days ago",
                    contacts=[Contact(name="@sunny_days", title="Local resident", email="https://instagram.com/sunny_days")],
                ),
                IndividualLead(
                    id="mock-ind-2",
                    name="Reddit",
                    source_url="https://reddit.com/r/mock/comments/2",
                    classification="Actively comparing options",
                    locale=request.location,
                    summary=f"Looking for recommendations on {request.subject}, budget is flexible.",
                    quality_score=74,
                    posted_at="1 week ago",
                    contacts=[Contact(name="u/mapleleaf", title="New parent")],
                ),
                IndividualLead(
                    id="mock-ind-3",
                    name="X",
                    source_url="https://x.com/mock/status/3",
                    classification="Curious",
                    locale=request.location,
                    summary=f"Thinking about trying {request.subject} this month.",
                    quality_score=61,
                    general_contact="dm open",
                    contacts=[Contact(name="@tinkerer", title="Hobbyist")],
                ),
            ]
        else:
            mock_leads = [
                OrganizationLead(
                    id="mock-org-1",
                    name="Northwind Logistics",
                    source_url="https://northwind.example.com",
                    classification=request.subject,
                    locale=request.location,
                    summary="Regional freight operator modernising its dispatch stack.",
                    quality_score=91,
                    general_contact="info@northwind.example.com",
                    phone_number="+1 555 0100",
                    employee_size="200-500",
                    linkedin_url="https://linkedin.com/company/northwind",
                    contacts=[Contact(name="Dana Reyes", title="CTO", email="dana@northwind.example.com")],
                ),
                OrganizationLead(
                    id="mock-org-2",
                    name="Bluebird Analytics",
                    source_url="https://bluebird.example.com",
                    classification=request.subject,
                    locale=request.location,
                    summary="Analytics consultancy expanding into managed services.",
                    quality_score=79,
                    employee_size="50-200",
                    contacts=[Contact(name="Sam Okafor", title="Head of Operations")],
                ),
                OrganizationLead(
                    id="mock-org-3",
                    name="Cobalt Health",
                    source_url="https://cobalt.example.com",
                    classification=request.subject,
                    locale=request.location,
                    summary="Clinic network rolling out a new patient portal.",
                    quality_score=66,
                    general_contact="hello@cobalt.example.com",
                    employee_size="10-50",
                ),
            ]

        self.report_progress(f"Found {len(mock_leads)} candidates")
        return [lead.model_dump() for lead in mock_leads[:request.count]]


class ScoutAgent(DiscoveryAgent):
    """Production Scout Agent: optional web grounding, then structured extraction with DeepSeek."""

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

    def _build_query(self, request: SearchRequest) -> str:
        if isinstance(request, IndividualSearch):
            parts = [request.subject, request.target_role, request.keywords, request.location]
            return " ".join(p for p in parts if p) + " recommendations forum post"
        return f"{request.subject} companies in {request.location}"

    async def _search_context(self, request: SearchRequest) -> str:
        if self.tavily is None:
            return ""
        self.report_progress("Searching the web for grounding context...")
        results = await self.tavily.search(self._build_query(request), max_results=10)
        return TavilyService.format_results(results)

    def _build_prompt(self, request: SearchRequest, search_context: str) -> str:
        if isinstance(request, IndividualSearch):
            return INDIVIDUAL_DISCOVERY_PROMPT.format(
                count=request.count,
                subject=request.subject,
                location=request.location,
                target_role=request.target_role or "Any",
                keywords=request.keywords or "None",
                language=request.language,
                search_context=search_context or "None",
            )
        product_context = request.product_context if isinstance(request, OrganizationSearch) else None
        return ORGANIZATION_DISCOVERY_PROMPT.format(
            count=request.count,
            subject=request.subject,
            location=request.location,
            product_context=product_context or "Not specified",
            language=request.language,
            search_context=search_context or "None",
        )

    async def discover(self, request: SearchRequest, credential: str) -> List[Dict[str, Any]]:
        """
        Ask the drafting model for ranked candidates.

        Errors from the model call propagate so the run can fail with them.

        Returns:
            Candidate dicts in ranked order, de-duplicated by name and link
        """
        self.report_progress(f"Starting discovery for {request.count} {request.mode} leads...")
        deepseek = DeepSeekService(
            credential,
            reasoning_model=self.settings.reasoning_model,
            drafting_model=self.settings.drafting_model,
        )

        search_context = await self._search_context(request)
        prompt = self._build_prompt(request, search_context)
        user_prompt = f"Find {request.count} leads for: {request.subject} in {request.location}."

        leads_data = await deepseek.call_json(system_prompt=prompt, user_prompt=user_prompt)

        # Handle both list and dict responses
        if isinstance(leads_data, dict):
            leads_data = leads_data.get("leads", leads_data.get("companies", [leads_data]))
        if not isinstance(leads_data, list):
            leads_data = [leads_data]

        candidates = []
        seen_names: set = set()
        for lead_dict in leads_data:
            if not isinstance(lead_dict, dict):
                self.report_progress(f"  Skipping non-object candidate: {lead_dict!r}"[:120])
                continue
            candidate = _clean_candidate(lead_dict)
            key = (candidate["name"].lower(), candidate["source_url"].lower())
            if not candidate["name"] or key in seen_names:
                continue
            seen_names.add(key)
            candidates.append(candidate)

        print(f"[Scout] {len(candidates)} candidates after de-duplication", flush=True)
        self.report_progress(f"Found {len(candidates)} candidates")
        return candidates
