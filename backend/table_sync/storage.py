import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from table_sync.config import client_settings

logger = logging.getLogger(__name__)

SOCIAL_VISIT_KEY = "has_visited_social_link"


class KeyValueStore(ABC):
    """Durable guest-side flags, the role browser storage plays for a web page."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass


class MemoryKeyValueStore(KeyValueStore):

    def __init__(self, initial: Optional[dict] = None):
        self._data = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileKeyValueStore(KeyValueStore):
    """Keeps the flags in a small JSON file. Values must be JSON serializable."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or client_settings.STATE_FILE)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"[JsonFileKeyValueStore] Ignoring corrupt state file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class SocialLinkGate:
    """Remembers whether the guest already opened the restaurant's social page.

    The WiFi password is only revealed after that visit.
    """

    def __init__(self, store: KeyValueStore, key: str = SOCIAL_VISIT_KEY):
        self.store = store
        self.key = key

    def has_visited(self) -> bool:
        return bool(self.store.get(self.key, False))

    def mark_visited(self) -> None:
        self.store.set(self.key, True)
