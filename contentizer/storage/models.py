"""
Data models for the storage layer.

Value types for the persisted documents. Every ``from_dict`` tolerates
missing or malformed fields and falls back to defaults, so records written
by older or newer versions still load.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
HISTORY_KEY = "history"
DAILY_QUOTA_KEY = "daily_quota"

PROVIDER_MODES = ("env", "keychain", "local")
DEFAULT_PROVIDER_MODE = "env"


def _str_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _int_or(value: Any, default: int) -> int:
    # bool is an int subclass; a stored true/false is not a count
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


@dataclass(frozen=True)
class Settings:
    """User-editable provider settings.
    
    The API key is never part of this record: it lives in the secure
    store or the environment and is resolved at call time.
    """
    provider_mode: str = DEFAULT_PROVIDER_MODE
    api_base_url: Optional[str] = None
    model: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Settings":
        if not isinstance(data, dict):
            return cls()
        mode = data.get("provider_mode")
        if not isinstance(mode, str) or not mode.strip():
            mode = DEFAULT_PROVIDER_MODE
        return cls(
            provider_mode=mode.strip(),
            api_base_url=_str_or_none(data.get("api_base_url")),
            model=_str_or_none(data.get("model")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider_mode": self.provider_mode,
            "api_base_url": self.api_base_url,
            "model": self.model,
        }


@dataclass(frozen=True)
class QuotaState:
    """Requests consumed within one UTC day bucket."""
    day_bucket: int = 0
    used: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "QuotaState":
        if not isinstance(data, dict):
            return cls()
        return cls(
            day_bucket=max(0, _int_or(data.get("day_bucket"), 0)),
            used=max(0, _int_or(data.get("used"), 0)),
        )

    def to_dict(self) -> Dict[str, int]:
        return {"day_bucket": self.day_bucket, "used": self.used}


@dataclass(frozen=True)
class HistoryItem:
    """Immutable record of one completed transformation.
    
    Only previews are kept; the full texts are never persisted.
    """
    id: str
    timestamp: int
    category: str
    style: str
    original_preview: str
    optimized_preview: str

    @classmethod
    def from_dict(cls, data: Any) -> Optional["HistoryItem"]:
        """Build an item from a stored record, or None if it has no usable id."""
        if not isinstance(data, dict):
            return None
        item_id = data.get("id")
        if not isinstance(item_id, str) or not item_id:
            return None

        def text(name: str) -> str:
            value = data.get(name)
            return value if isinstance(value, str) else ""

        return cls(
            id=item_id,
            timestamp=_int_or(data.get("timestamp"), 0),
            category=text("category"),
            style=text("style"),
            original_preview=text("original_preview"),
            optimized_preview=text("optimized_preview"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "category": self.category,
            "style": self.style,
            "original_preview": self.original_preview,
            "optimized_preview": self.optimized_preview,
        }


def history_from_value(value: Any) -> List[HistoryItem]:
    """Decode a stored history document, dropping entries that can't be read."""
    if not isinstance(value, list):
        if value is not None:
            logger.warning("Ignoring malformed history document of type %s", type(value).__name__)
        return []
    items = []
    for raw in value:
        item = HistoryItem.from_dict(raw)
        if item is None:
            logger.warning("Skipping malformed history entry")
            continue
        items.append(item)
    return items
