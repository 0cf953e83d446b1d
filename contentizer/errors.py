"""
Error taxonomy.

Every failure an operation can report is a ContentizerError subclass,
so callers can catch the base class and show the message as-is.
"""

from typing import Optional


class ContentizerError(Exception):
    """Base class for all errors raised by Contentizer operations."""


class EmptyInput(ContentizerError):
    """Raised when the text to optimize is blank after trimming."""
    def __init__(self, message: str = "Enter some text to optimize."):
        super().__init__(message)


class InputTooLong(ContentizerError):
    """Raised when the trimmed input exceeds the configured character ceiling."""
    def __init__(self, limit: int):
        super().__init__(f"Input too long. Limit is {limit} characters.")
        self.limit = limit


class QuotaExceeded(ContentizerError):
    """Raised when the daily request quota is exhausted."""
    def __init__(self, limit: int):
        super().__init__(
            f"Daily quota reached ({limit} requests/day). Try again tomorrow."
        )
        self.limit = limit


class CredentialMissing(ContentizerError):
    """Raised when no API key can be resolved for the configured mode."""


class InvalidCredential(ContentizerError):
    """Raised when a submitted API key is empty after trimming."""
    def __init__(self, message: str = "API key cannot be empty."):
        super().__init__(message)


class StoreIOError(ContentizerError):
    """Raised when the durable store cannot be read or written."""


class ProviderError(ContentizerError):
    """Raised when the provider answers with a non-success status.

    The raw response body is kept verbatim on ``body``.
    """
    def __init__(self, status: int, body: str):
        super().__init__(f"API error {status}: {body}")
        self.status = status
        self.body = body


class TransportError(ContentizerError):
    """Raised when the provider could not be reached or the reply was unreadable."""


class UnknownProviderMode(ContentizerError):
    """Raised for a provider_mode outside env, keychain and local."""
    def __init__(self, mode: Optional[str]):
        super().__init__(
            f"Unknown provider mode {mode!r}. Use 'env', 'keychain' or 'local'."
        )
        self.mode = mode
