"""Process-wide configuration loaded from the environment / .env file."""

import os
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

MOCK_CREDENTIAL = "mock"


def _lookup(key: str, default: str = "", secrets: Optional[Mapping[str, Any]] = None) -> str:
    """Read ``key`` from a secrets mapping (e.g. st.secrets), then the environment."""
    if secrets is not None:
        try:
            if key in secrets:
                return str(secrets[key])
        except FileNotFoundError:
            # st.secrets raises when no secrets.toml exists
            pass
    return os.getenv(key, default)


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Runtime settings shared by the pipeline, its agents and the UI."""

    deepseek_api_key: str = Field("", description="The single credential required for discovery and enrichment")
    tavily_api_key: str = Field("", description="Optional web search key used to ground discovery and enrichment")
    reasoning_model: str = Field("deepseek-reasoner", description="Model used for enrichment analysis")
    drafting_model: str = Field("deepseek-chat", description="Model used for discovery extraction")

    discovery_timeout: float = Field(120.0, gt=0, description="Seconds before a discovery call is abandoned")
    enrichment_timeout: float = Field(90.0, gt=0, description="Seconds before an enrichment call is abandoned")
    max_concurrent_enrichments: int = Field(4, ge=1, description="Enrichment calls allowed in flight at once")
    stream_delay: float = Field(0.0, ge=0, description="Pause between committed candidates while streaming")

    use_mock: bool = Field(False, description="Use mock agents instead of live API calls")

    @classmethod
    def from_env(cls, secrets: Optional[Mapping[str, Any]] = None, **overrides) -> "Settings":
        """
        Build settings from the environment, letting explicit values win.

        Args:
            secrets: Mapping consulted before the environment (st.secrets on Streamlit Cloud)
            **overrides: Field values that replace what was found; None values are ignored
        """
        def get(key: str, default: str = "") -> str:
            return _lookup(key, default, secrets)

        values = {
            "deepseek_api_key": get("DEEPSEEK_API_KEY"),
            "tavily_api_key": get("TAVILY_API_KEY"),
            "reasoning_model": get("PROSPECTOR_REASONING_MODEL", "deepseek-reasoner"),
            "drafting_model": get("PROSPECTOR_DRAFTING_MODEL", "deepseek-chat"),
            "discovery_timeout": float(get("PROSPECTOR_DISCOVERY_TIMEOUT", "120")),
            "enrichment_timeout": float(get("PROSPECTOR_ENRICHMENT_TIMEOUT", "90")),
            "max_concurrent_enrichments": int(get("PROSPECTOR_MAX_CONCURRENT_ENRICHMENTS", "4")),
            "stream_delay": float(get("PROSPECTOR_STREAM_DELAY", "0")),
            "use_mock": _as_bool(get("PROSPECTOR_USE_MOCK"), False),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def credential(self) -> Optional[str]:
        """The credential handed to external services, or None when unset."""
        key = self.deepseek_api_key.strip()
        if not key and self.use_mock:
            # Mock agents never leave the process
            return MOCK_CREDENTIAL
        return key or None

    def require_credential(self) -> str:
        """Return the credential or raise ConfigurationError when absent."""
        credential = self.credential
        if credential is None:
            raise ConfigurationError("DEEPSEEK_API_KEY")
        return credential
