"""
Text optimization service.

Composes the quota gate, settings, credential resolver, prompt builder,
provider client and history buffer into the operations exposed to the
presentation layer.

Optimize Order:
1. Input validation - blank or oversized text never costs quota
2. Quota - consumed and persisted before the provider is contacted
3. Settings and credential - resolved fresh on every call
4. Completion - provider errors propagate unchanged
5. History - written only after a successful completion
"""

import logging
import time
from typing import Any, Callable, List, Mapping, Optional, Union

from ..config.loader import AppConfig
from ..errors import EmptyInput, InputTooLong, UnknownProviderMode
from ..sdk.base import LLMClient
from ..sdk.openai_client import OpenAIClient
from ..storage.models import PROVIDER_MODES, SETTINGS_KEY, HistoryItem, Settings
from ..storage.store import KeyValueStore, SQLiteStore
from .credentials import CredentialResolver
from .history import HistoryBuffer, make_history_item
from .presets import Presets, default_presets
from .prompts import build_request
from .quota import QuotaGate, QuotaStatus

logger = logging.getLogger(__name__)

# (api_key, api_base_url, model) -> client
ClientFactory = Callable[[str, Optional[str], Optional[str]], LLMClient]


class TextOptimizer:
    """Entry point for every user-facing operation.

    Settings, quota and history are re-read from the store on each call;
    nothing is cached on the instance.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: Optional[AppConfig] = None,
        credentials: Optional[CredentialResolver] = None,
        client_factory: ClientFactory = OpenAIClient,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.store = store
        self.config = config or AppConfig()
        self.credentials = credentials or CredentialResolver(
            production=self.config.is_production
        )
        self.client_factory = client_factory
        self.quota = QuotaGate(store, self.config.daily_quota, clock=clock or time.time)
        self.history = HistoryBuffer(store)

    def optimize(
        self,
        category: str,
        style: str,
        extra_instructions: str,
        original_text: str,
    ) -> str:
        """Rewrite ``original_text`` for the given category and style.

        Returns:
            The full optimized text (history only keeps a preview)

        Raises:
            EmptyInput: If the text is blank
            InputTooLong: If the trimmed text exceeds input_max_chars
            QuotaExceeded: If today's quota is used up
            CredentialMissing: If no API key is available
            UnknownProviderMode: If the stored provider_mode is not recognized
            ProviderError: If the provider answers with a non-success status
            TransportError: If the provider can't be reached
            StoreIOError: If quota or history can't be persisted
        """
        text = (original_text or "").strip()
        if not text:
            raise EmptyInput()
        if len(text) > self.config.input_max_chars:
            raise InputTooLong(self.config.input_max_chars)

        self.quota.consume()

        settings = self.get_settings()
        api_key = self.credentials.resolve(settings.provider_mode)

        client = self.client_factory(
            api_key,
            settings.api_base_url,
            settings.model or self.config.model,
        )
        request = build_request(
            category,
            style,
            extra_instructions or "",
            text,
            global_prompt=self.config.global_prompt,
            language=self.config.language,
            output_max_chars=self.config.output_ceiling,
        )
        optimized = client.complete(request).text

        self.history.insert(make_history_item(
            category, style, text, optimized, timestamp=int(self.quota.clock()),
        ))
        logger.info(
            "Optimized %d chars (%s/%s) into %d chars",
            len(text), category, style, len(optimized),
        )
        return optimized

    def get_settings(self) -> Settings:
        """Current settings; the API key is never included."""
        return Settings.from_dict(self.store.get(SETTINGS_KEY))

    def set_settings(self, settings: Union[Settings, Mapping[str, Any]]) -> None:
        """Save provider_mode, api_base_url and model.

        The update merges into the stored record, so fields not managed
        here (including any stored credential) survive. An ``api_key``
        submitted here is ignored.

        Raises:
            UnknownProviderMode: If provider_mode is not recognized
            StoreIOError: If the settings can't be persisted
        """
        if not isinstance(settings, Settings):
            settings = Settings.from_dict(dict(settings))
        if settings.provider_mode not in PROVIDER_MODES:
            raise UnknownProviderMode(settings.provider_mode)

        with self.store.lock(SETTINGS_KEY):
            current = self.store.get(SETTINGS_KEY)
            record = dict(current) if isinstance(current, dict) else {}
            record.update(settings.to_dict())
            self.store.set(SETTINGS_KEY, record)
            self.store.save()
        logger.info("Settings updated (provider_mode=%s)", settings.provider_mode)

    def get_history(self) -> List[HistoryItem]:
        return self.history.items()

    def add_history_item(self, item: HistoryItem) -> None:
        self.history.insert(item)

    def clear_history(self) -> None:
        self.history.clear()

    def get_presets(self) -> Presets:
        return default_presets()

    def has_api_key(self) -> bool:
        """Whether an API key can be resolved for the current provider mode."""
        return self.credentials.has_key(self.get_settings().provider_mode)

    def set_api_key(self, value: str) -> None:
        """Store a new API key in the secure store, replacing any previous one.

        Raises:
            InvalidCredential: If ``value`` is empty after trimming
        """
        self.credentials.store(value)

    def quota_status(self) -> QuotaStatus:
        return self.quota.status()


def create_optimizer(config: AppConfig) -> TextOptimizer:
    """Build a TextOptimizer backed by the SQLite store at ``config.store_path``."""
    return TextOptimizer(SQLiteStore(config.store_path), config=config)
