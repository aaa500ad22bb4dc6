"""
Exceptions - Error taxonomy for the agent service

Every error carries the HTTP status it maps to and renders its own
JSON body. Messages must never contain key material or credentials;
use redact() on anything derived from a third-party exception.
"""

from typing import Any, Dict, Iterable, List, Optional


REDACTED = "***"


def redact(text: str, secrets: Iterable[Optional[str]]) -> str:
    """
    Replace every occurrence of the given secret strings in text.

    Args:
        text: Message that may embed sensitive values
        secrets: Values to scrub (None and empty entries are skipped)

    Returns:
        Text safe to return to a client
    """
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


class AgentServerError(Exception):
    """Base class for errors surfaced to HTTP clients."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(AgentServerError):
    """Client-caused request error enumerating every violation."""

    status_code = 400

    def __init__(self, errors: List[str], missing_fields: Optional[List[str]] = None):
        self.errors = list(errors)
        self.missing_fields = list(missing_fields or [])
        if self.missing_fields:
            summary = "Missing required fields"
        else:
            summary = self.errors[0] if self.errors else "Invalid request"
        super().__init__(summary)

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.missing_fields:
            body["missingFields"] = self.missing_fields
        if len(self.errors) > 1 or self.missing_fields:
            body["details"] = self.errors
        return body


class StateError(AgentServerError):
    """Operation not allowed in the current session lifecycle state."""

    status_code = 400


class ProvisioningError(AgentServerError):
    """Key derivation, key generation or agent construction failed."""

    status_code = 500

    def to_response(self) -> Dict[str, Any]:
        return {"error": "Failed to initialize agent", "details": self.message}


class AgentError(AgentServerError):
    """The reasoning/tool-call engine failed during a turn."""

    status_code = 500

    def to_response(self) -> Dict[str, Any]:
        return {"error": "Internal server error"}
