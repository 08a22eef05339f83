"""Search request models describing one discovery campaign."""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .leads import INDIVIDUAL, ORGANIZATION

COUNT_OPTIONS: List[int] = [10, 20, 50, 100]
LANGUAGE_OPTIONS: List[str] = ["English", "Spanish", "French", "German"]


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class SearchRequestBase(BaseModel):
    """Fields every campaign needs."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    subject: str = Field(
        ...,
        min_length=1,
        description="Target industry (organization) or your business/product (individual)"
    )
    location: str = Field(..., min_length=1, description="Location or target market")
    count: int = Field(20, ge=1, le=100, description="How many leads to discover")
    language: str = Field("English", min_length=1, description="Output language for generated text")

    @property
    def refinements(self) -> dict:
        """Mode-specific refinements that are actually set."""
        return {}


class OrganizationSearch(SearchRequestBase):
    """B2B company search."""

    mode: Literal["organization"] = ORGANIZATION
    product_context: Optional[str] = Field(
        None,
        description="What you are selling; helps infer the right decision maker"
    )

    @field_validator("product_context")
    @classmethod
    def normalize_blank(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @property
    def refinements(self) -> dict:
        return {"product_context": self.product_context} if self.product_context else {}


class IndividualSearch(SearchRequestBase):
    """B2C social listening search."""

    mode: Literal["individual"] = INDIVIDUAL
    target_role: Optional[str] = Field(None, description="Role or persona to look for")
    keywords: Optional[str] = Field(None, description="Specific criteria or phrases")

    @field_validator("target_role", "keywords")
    @classmethod
    def normalize_blank(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @property
    def refinements(self) -> dict:
        values = {"target_role": self.target_role, "keywords": self.keywords}
        return {k: v for k, v in values.items() if v}


SearchRequest = Annotated[Union[OrganizationSearch, IndividualSearch], Field(discriminator="mode")]

search_request_adapter: TypeAdapter = TypeAdapter(SearchRequest)
