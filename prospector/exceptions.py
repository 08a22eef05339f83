"""
Custom exceptions for Prospector.
Gives the pipeline, its services and the UI one error vocabulary.
"""
from typing import Optional


class ProspectorError(Exception):
    """Base exception for Prospector"""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(ProspectorError):
    """Required configuration (the API credential) is missing"""
    def __init__(self, setting: str = "DEEPSEEK_API_KEY", message: Optional[str] = None):
        self.setting = setting
        super().__init__(message or f"{setting} is not configured. Add it to your .env file or Streamlit secrets.")


class RequestValidationError(ProspectorError):
    """Search request failed validation"""
    def __init__(self, message: str = "Validation failed", field: Optional[str] = None):
        self.field = field
        if field:
            message = f"Validation failed for field '{field}': {message}"
        super().__init__(message)


class RunStateError(ProspectorError):
    """Operation not allowed in the current run phase"""
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move pipeline run from '{current}' to '{requested}'")


class LeadNotFoundError(ProspectorError):
    """Lead id not present in the store"""
    def __init__(self, lead_id: str):
        self.lead_id = lead_id
        super().__init__(f"Lead with id '{lead_id}' not found")


class DuplicateLeadError(ProspectorError):
    """Lead id already present in the store"""
    def __init__(self, lead_id: str):
        self.lead_id = lead_id
        super().__init__(f"Lead with id '{lead_id}' already exists")


class DiscoveryError(ProspectorError):
    """Discovery produced no usable candidates"""
    pass


class ExternalServiceError(ProspectorError):
    """External service call failed"""
    def __init__(self, service: str = "External service", message: Optional[str] = None):
        self.service = service
        msg = f"{service} call failed"
        if message:
            msg = f"{msg}: {message}"
        super().__init__(msg)
