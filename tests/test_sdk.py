"""
Unit tests for SDK layer.

Tests the OpenAI-compatible client's payload, parsing and error mapping.
"""

from unittest.mock import Mock, patch

import httpx
import openai
import pytest

from contentizer.core.prompts import OptimizeRequest
from contentizer.errors import ProviderError, TransportError
from contentizer.sdk.openai_client import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    MAX_COMPLETION_TOKENS,
    OpenAIClient,
)

REQUEST = OptimizeRequest(system_prompt="You are an editor.", user_message="Fix this.")
URL = "https://api.openai.com/v1/chat/completions"


def make_response(*contents):
    """Build a chat completion response with one choice per content."""
    response = Mock()
    response.choices = [Mock(message=Mock(content=content)) for content in contents]
    return response


def status_error(status: int, body: str) -> openai.APIStatusError:
    response = httpx.Response(status, text=body, request=httpx.Request("POST", URL))
    return openai.APIStatusError(f"Error code: {status}", response=response, body=None)


class TestOpenAIClient:
    """Test OpenAIClient behavior."""
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_init_defaults(self, mock_openai_class):
        """Unconfigured base URL and model fall back to fixed defaults."""
        client = OpenAIClient(api_key="sk-test")
        
        assert client.base_url == DEFAULT_BASE_URL
        assert client.model == DEFAULT_MODEL
        mock_openai_class.assert_called_once_with(
            api_key="sk-test",
            base_url=DEFAULT_BASE_URL,
            max_retries=0
        )
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_init_custom_endpoint(self, mock_openai_class):
        """Trailing slashes are stripped from the base URL."""
        client = OpenAIClient("sk-test", base_url="http://localhost:8080/v1/", model="llama3")
        
        assert client.base_url == "http://localhost:8080/v1"
        assert client.model == "llama3"
    
    def test_init_missing_key(self):
        """An empty API key is rejected before any request."""
        with pytest.raises(ValueError, match="api_key is required"):
            OpenAIClient(api_key="  ")
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_complete_sends_two_messages(self, mock_openai_class):
        """System then user message, with the fixed token cap."""
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = make_response("ok")
        mock_openai_class.return_value = mock_client
        
        OpenAIClient("sk-test", model="gpt-4o").complete(REQUEST)
        
        mock_client.chat.completions.create.assert_called_once_with(
            model="gpt-4o",
            messages=[
                {"role": "system", "content": "You are an editor."},
                {"role": "user", "content": "Fix this."},
            ],
            max_tokens=MAX_COMPLETION_TOKENS
        )
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_complete_trims_first_choice(self, mock_openai_class):
        """Only the first choice is used, trimmed."""
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = make_response(
            "\n  Please review the attached text.  \n", "second"
        )
        mock_openai_class.return_value = mock_client
        
        result = OpenAIClient("sk-test").complete(REQUEST)
        assert result.text == "Please review the attached text."
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_no_choices_returns_empty(self, mock_openai_class):
        """A reply without choices is an empty string, not an error."""
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = make_response()
        mock_openai_class.return_value = mock_client
        
        assert OpenAIClient("sk-test").complete(REQUEST).text == ""
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_null_content_returns_empty(self, mock_openai_class):
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = make_response(None)
        mock_openai_class.return_value = mock_client
        
        assert OpenAIClient("sk-test").complete(REQUEST).text == ""
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_status_error_becomes_provider_error(self, mock_openai_class):
        """Non-success status carries status and raw body."""
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = status_error(429, "rate limited")
        mock_openai_class.return_value = mock_client
        
        with pytest.raises(ProviderError) as excinfo:
            OpenAIClient("sk-test").complete(REQUEST)
        
        assert excinfo.value.status == 429
        assert excinfo.value.body == "rate limited"
        assert str(excinfo.value) == "API error 429: rate limited"
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_server_error_body_kept_verbatim(self, mock_openai_class):
        body = '{"error": {"message": "upstream down"}}'
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = status_error(503, body)
        mock_openai_class.return_value = mock_client
        
        with pytest.raises(ProviderError) as excinfo:
            OpenAIClient("sk-test").complete(REQUEST)
        assert excinfo.value.body == body
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_connection_error_becomes_transport_error(self, mock_openai_class):
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", URL)
        )
        mock_openai_class.return_value = mock_client
        
        with pytest.raises(TransportError):
            OpenAIClient("sk-test").complete(REQUEST)
    
    @patch('contentizer.sdk.openai_client.OpenAI')
    def test_timeout_becomes_transport_error(self, mock_openai_class):
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = openai.APITimeoutError(
            request=httpx.Request("POST", URL)
        )
        mock_openai_class.return_value = mock_client
        
        with pytest.raises(TransportError):
            OpenAIClient("sk-test").complete(REQUEST)
