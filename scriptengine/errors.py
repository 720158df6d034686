from typing import Any, Optional


class InputValidationError(ValueError):
    """Raised when required input is missing, before any provider is contacted."""


class UpstreamError(Exception):
    """
    An external provider rejected a request, returned an unusable payload,
    or could not be reached.

    `details` carries the provider's own message when one was available.
    """

    def __init__(self, details: str, payload: Any = None, status_code: Optional[int] = None):
        super().__init__(details)
        self.details = details
        self.payload = payload
        self.status_code = status_code


def provider_message(payload: Any) -> Optional[str]:
    """
    Pulls the human readable message out of a provider error body.

    Handles both the `{"error": {"message": ...}}` envelope (Gemini, Anthropic)
    and an already unwrapped `{"message": ...}` object (OpenAI SDK).
    """
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if payload.get("message"):
        return str(payload["message"])
    return None
