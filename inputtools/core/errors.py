"""
Error taxonomy for locator building, response decoding and transport.
"""
from typing import Optional


class InputToolsError(Exception):
    """Base class for every error surfaced to the user as a visible error state."""


class InvalidInput(InputToolsError):
    pass


class MalformedEnvelope(InputToolsError):
    pass


class MalformedPayload(InputToolsError):
    pass


class UnexpectedShape(InputToolsError):
    pass


class ProviderError(InputToolsError):
    def __init__(self, status):
        super().__init__(f"API returned status: {status}")
        self.status = status


class TransportError(InputToolsError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
