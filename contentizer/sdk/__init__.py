"""
SDK for Contentizer.

Provider clients that turn one prompt pair into one completion.
"""

from .base import CompletionResult, LLMClient
from .openai_client import OpenAIClient

__all__ = ["CompletionResult", "LLMClient", "OpenAIClient"]
