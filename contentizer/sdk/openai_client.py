"""
OpenAI-compatible chat completions client.

Works against api.openai.com or any endpoint speaking the same
/chat/completions protocol (local servers, proxies).
"""

import logging
from typing import Optional

import openai
from openai import OpenAI

from ..core.prompts import OptimizeRequest
from ..errors import ProviderError, TransportError
from .base import CompletionResult, LLMClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
MAX_COMPLETION_TOKENS = 4096


class OpenAIClient(LLMClient):
    """Chat completions client with typed errors.

    Any non-success status becomes a ProviderError carrying the raw body.
    SDK retries are disabled: retrying is up to the caller, and every
    retry goes through quota accounting again.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = MAX_COMPLETION_TOKENS,
    ):
        """Initialize the client.

        Args:
            api_key: Resolved provider API key (required)
            base_url: API base URL (defaults to the OpenAI endpoint)
            model: Model name (defaults to gpt-4o-mini)
            max_tokens: Generation length cap sent with every request

        Raises:
            ValueError: If api_key is missing/empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("api_key is required and cannot be empty")

        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.model = model or DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.client = OpenAI(api_key=api_key, base_url=self.base_url, max_retries=0)

    def complete(self, request: OptimizeRequest) -> CompletionResult:
        """Send the system and user messages and return the trimmed reply.

        Returns an empty string when the provider sends back no choices.

        Raises:
            ProviderError: On any non-success HTTP status
            TransportError: On connection failures, timeouts or unreadable replies
        """
        messages = [
            {"role": "system", "content": request.system_prompt},
            {"role": "user", "content": request.user_message},
        ]
        logger.debug("Requesting completion from %s with model %s", self.base_url, self.model)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            raise ProviderError(e.status_code, e.response.text) from e
        except openai.APIError as e:
            raise TransportError(str(e)) from e

        if not response.choices:
            return CompletionResult(text="")
        content = response.choices[0].message.content or ""
        return CompletionResult(text=content.strip())
