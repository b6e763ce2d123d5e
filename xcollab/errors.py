# xcollab/errors.py
from typing import Any


class LLMConfigError(RuntimeError):
    """Raised when the selected LLM provider is missing required settings."""
    pass


class LLMConnectionError(RuntimeError):
    """Raised when the LLM service cannot be reached."""
    pass


class LLMUpstreamError(RuntimeError):
    """Raised when the LLM service answers with a non-2xx status."""

    def __init__(self, status_code: int, body: Any = None):
        super().__init__(f"LLM HTTP error {status_code}")
        self.status_code = status_code
        self.body = body


class LLMResponseError(RuntimeError):
    """Raised when the LLM answer is malformed or carries no content."""
    pass


class DataStoreError(RuntimeError):
    """Raised when the hackathon data store cannot be queried."""
    pass
