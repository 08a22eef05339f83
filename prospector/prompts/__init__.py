"""Prompt templates for AI agents."""

from .templates import (
    DEFAULT_PRODUCT_CONTEXT,
    ORGANIZATION_DISCOVERY_PROMPT,
    INDIVIDUAL_DISCOVERY_PROMPT,
    ENRICHMENT_SYSTEM_PROMPT,
)

__all__ = [
    "DEFAULT_PRODUCT_CONTEXT",
    "ORGANIZATION_DISCOVERY_PROMPT",
    "INDIVIDUAL_DISCOVERY_PROMPT",
    "ENRICHMENT_SYSTEM_PROMPT",
]
