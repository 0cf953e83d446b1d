"""
Provider client abstraction.

Implement ``LLMClient`` to add a provider; the optimizer picks one
implementation when it is constructed and never switches afterwards.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..core.prompts import OptimizeRequest


@dataclass(frozen=True)
class CompletionResult:
    """Result of a single, non-streaming completion."""
    text: str


class LLMClient(ABC):
    """Sends one completion request and returns the text."""

    @abstractmethod
    def complete(self, request: OptimizeRequest) -> CompletionResult:
        """Run one completion.

        Raises:
            ProviderError: If the provider answers with a non-success status
            TransportError: If the provider can't be reached
        """
