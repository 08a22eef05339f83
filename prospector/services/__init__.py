"""External service integrations."""

from .tavily_service import TavilyService
from .deepseek_service import DeepSeekService
from .export_service import generate_csv, leads_to_dataframe, lead_to_row

__all__ = [
    "TavilyService",
    "DeepSeekService",
    "generate_csv",
    "leads_to_dataframe",
    "lead_to_row",
]
