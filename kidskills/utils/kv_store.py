"""
Key-value persistence for session state.

Values are strings; ``get_json``/``set_json`` layer JSON on top. Every
store notifies subscribers after a key changes so other parts of the
application can react to updates they did not make themselves.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import redis

from kidskills.exceptions import StorageError
from kidskills.utils.logger import get_logger

logger = get_logger(__name__)

ChangeListener = Callable[[str, Optional[str]], None]


class KeyValueStore(ABC):
    """Base class for string key-value stores with change notification."""

    def __init__(self):
        self._listeners: List[ChangeListener] = []

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def _write(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def _delete(self, key: str) -> None:
        pass

    def set(self, key: str, value: str) -> None:
        self._write(key, value)
        self._notify(key, value)

    def remove(self, key: str) -> None:
        self._delete(key)
        self._notify(key, None)

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable JSON value for key: {key}")
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, default=str))

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str, value: Optional[str]) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception as e:
                logger.warning(f"Store listener failed for key {key}: {e}")


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__()
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _write(self, key: str, value: str) -> None:
        self._data[key] = value

    def _delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileKeyValueStore(KeyValueStore):
    """Whole store kept in one JSON object on disk, rewritten on every change."""

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read store file {self.path}, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold an object, starting empty")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write store file: {e}", {"path": self.path}) from e

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _write(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def _delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()


class RedisKeyValueStore(KeyValueStore):
    def __init__(self, client: redis.Redis, prefix: str = "kidskills:"):
        super().__init__()
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "kidskills:") -> "RedisKeyValueStore":
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True
        )
        return cls(client, prefix)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis get failed: {e}", {"key": key}) from e

    def _write(self, key: str, value: str) -> None:
        try:
            self.client.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageError(f"Redis set failed: {e}", {"key": key}) from e

    def _delete(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis delete failed: {e}", {"key": key}) from e


def create_store(settings) -> KeyValueStore:
    """Build the store selected by KV_BACKEND, falling back to memory when Redis is unreachable."""
    backend = settings.KV_BACKEND
    if backend == "file":
        logger.info(f"Using JSON file store at {settings.KV_FILE_PATH}")
        return JsonFileKeyValueStore(settings.KV_FILE_PATH)
    if backend == "redis":
        try:
            store = RedisKeyValueStore.from_url(settings.REDIS_URL, settings.KV_KEY_PREFIX)
            store.client.ping()
            logger.info("✅ Redis store connected successfully")
            return store
        except redis.RedisError as e:
            logger.warning(f"⚠️ Redis store not available, falling back to memory: {e}")
    return InMemoryKeyValueStore()
