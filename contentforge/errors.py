"""Exception types shared by the client, generator and API layers."""

from typing import Optional


class ContentForgeError(Exception):
    """Base class for service errors."""


class ConfigurationError(ContentForgeError):
    """The service is missing configuration required to reach the backend."""


class InferenceError(ContentForgeError):
    """A call to the text-generation backend did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GenerationError(ContentForgeError):
    """The first generation pass failed, so no article can be produced."""

    def __init__(self, cause: Exception):
        super().__init__(f"Hugging Face first call failed: {cause}")
        self.cause = cause
