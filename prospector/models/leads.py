"""Pydantic models for lead data structures."""

from enum import Enum
from typing import Annotated, ClassVar, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

ORGANIZATION = "organization"
INDIVIDUAL = "individual"

CampaignMode = Literal["organization", "individual"]


class EnrichmentStatus(str, Enum):
    """Per-record enrichment lifecycle."""

    NEW = "new"
    ENRICHING = "enriching"
    COMPLETE = "complete"
    FAILED = "failed"


class Contact(BaseModel):
    """A person attached to a lead at discovery time."""

    model_config = ConfigDict(frozen=True)

    name: str = Field("", description="Contact name or social handle")
    title: str = Field("", description="Job title or role")
    email: Optional[str] = Field(None, description="Email, profile or inbox link")

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())


class SocialLinks(BaseModel):
    """Social profiles found during enrichment."""

    model_config = ConfigDict(frozen=True)

    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None


class EnrichedProfile(BaseModel):
    """Deep analysis produced by the enrichment agent."""

    model_config = ConfigDict(frozen=True)

    key_insights: List[str] = Field(default_factory=list, description="Strategic observations about the lead")
    products_services: List[str] = Field(default_factory=list, description="What the lead sells")
    technologies: List[str] = Field(default_factory=list, description="Detected technology stack")
    competitive_advantage: str = Field("", description="What sets the lead apart")
    target_market: str = Field("", description="Who the lead sells to")
    pitch_strategy: str = Field("", description="How to position the offer for this lead")
    outreach_message: str = Field("", description="Ready-to-send outreach draft")
    social_links: Optional[SocialLinks] = Field(None, description="Social profile links if found")

    def is_empty(self) -> bool:
        """True when the agent returned a shell with nothing usable in it."""
        lists = (self.key_insights, self.products_services, self.technologies)
        texts = (
            self.competitive_advantage,
            self.target_market,
            self.pitch_strategy,
            self.outreach_message,
        )
        return not any(lists) and not any(t.strip() for t in texts)


class LeadRecord(BaseModel):
    """Fields shared by every discovered candidate."""

    model_config = ConfigDict(frozen=True)

    # Fields the enrichment phase may replace; everything else is write-once.
    MUTABLE_FIELDS: ClassVar[frozenset] = frozenset({"enrichment_status", "enriched_data"})

    id: str = Field(..., min_length=1, description="Stable identifier for the lead's lifetime")
    mode: CampaignMode
    name: str = Field(..., description="Company name (organization) or platform (individual)")
    source_url: str = Field("", description="Company website or post link")
    classification: str = Field("", description="Industry (organization) or sentiment (individual)")
    locale: str = Field("", description="Country or location")
    summary: str = Field("", description="Free-text summary or post content")
    quality_score: int = Field(0, ge=0, le=100, description="Lead quality from 0-100")
    general_contact: Optional[str] = Field(None, description="General email or contact info")
    contacts: List[Contact] = Field(default_factory=list, description="Decision makers, in discovery order")

    enrichment_status: EnrichmentStatus = EnrichmentStatus.NEW
    enriched_data: Optional[EnrichedProfile] = None

    @model_validator(mode="after")
    def check_profile_status(self):
        if self.enriched_data is not None and self.enrichment_status != EnrichmentStatus.COMPLETE:
            raise ValueError("enriched_data may only be set on a lead whose enrichment is complete")
        return self

    @property
    def has_contact(self) -> bool:
        """A contact email or a general contact channel is known."""
        if self.general_contact and self.general_contact.strip():
            return True
        return any(c.has_email for c in self.contacts)

    def with_enrichment(
        self,
        status: EnrichmentStatus,
        enriched_data: Optional[EnrichedProfile] = None,
    ) -> "LeadRecord":
        """Return a copy carrying a new enrichment status (and profile)."""
        data = self.model_dump(exclude={"enrichment_status", "enriched_data"})
        return type(self)(
            **data,
            enrichment_status=status,
            enriched_data=enriched_data,
        )


class OrganizationLead(LeadRecord):
    """Company discovered by an organization-targeted campaign."""

    mode: Literal["organization"] = ORGANIZATION
    phone_number: Optional[str] = Field(None, description="Main phone number")
    employee_size: Optional[str] = Field(None, description="Employee count band, e.g. '50-200'")
    linkedin_url: Optional[str] = Field(None, description="Company LinkedIn page")


class IndividualLead(LeadRecord):
    """Person found by an individual-targeted (social listening) campaign."""

    mode: Literal["individual"] = INDIVIDUAL
    posted_at: Optional[str] = Field(None, description="When the matching post was published")

    @property
    def handle(self) -> str:
        """The individual's handle, carried as the synthetic first contact."""
        return self.contacts[0].name if self.contacts else ""


Lead = Annotated[Union[OrganizationLead, IndividualLead], Field(discriminator="mode")]
