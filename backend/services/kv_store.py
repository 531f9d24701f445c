"""Key-value storage backends holding JSON documents."""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from supabase import create_client, Client

from config import SUPABASE_URL, SUPABASE_KEY, KV_TABLE

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage backend cannot be read or written."""


class KeyValueStore(ABC):
    """JSON document store keyed by string."""

    @abstractmethod
    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the document stored under ``key``, or None if absent."""

    @abstractmethod
    def set_json(self, key: str, value: Dict[str, Any]) -> None:
        """Store ``value`` under ``key``, replacing any previous document."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return whether a document is stored under ``key``."""


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store for development and tests.

    Values are kept as JSON text so callers never share mutable state with
    the store.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, value: Dict[str, Any]) -> None:
        self._data[key] = json.dumps(value)

    def exists(self, key: str) -> bool:
        return key in self._data


class SupabaseKeyValueStore(KeyValueStore):
    """Stores documents in a Supabase table with ``key`` and ``value`` (jsonb) columns."""

    def __init__(self, client: Optional[Client] = None, table: str = KV_TABLE):
        """
        Initialize the store with a Supabase client.

        Args:
            client: Existing Supabase client (created from SUPABASE_URL/SUPABASE_KEY if omitted)
            table: Name of the key-value table
        """
        if client is None:
            if not SUPABASE_URL or not SUPABASE_KEY:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")
            client = create_client(SUPABASE_URL, SUPABASE_KEY)

        self.client: Client = client
        self.table = table
        logger.info(f"SupabaseKeyValueStore initialized with table '{table}'")

    def _select(self, key: str, columns: str):
        try:
            result = self.client.table(self.table).select(columns).eq("key", key).limit(1).execute()
        except Exception as e:
            logger.error(f"Error reading key {key} from {self.table}: {e}", exc_info=True)
            raise StorageError(f"Failed to read key {key}: {e}") from e
        return result.data or []

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        rows = self._select(key, "value")
        if not rows:
            return None
        return rows[0]["value"]

    def set_json(self, key: str, value: Dict[str, Any]) -> None:
        try:
            self.client.table(self.table).upsert({"key": key, "value": value}).execute()
        except Exception as e:
            logger.error(f"Error writing key {key} to {self.table}: {e}", exc_info=True)
            raise StorageError(f"Failed to write key {key}: {e}") from e

    def exists(self, key: str) -> bool:
        return bool(self._select(key, "key"))


def create_key_value_store(backend: str) -> KeyValueStore:
    """
    Build the configured storage backend.

    Args:
        backend: "supabase" or "memory"

    Returns:
        KeyValueStore instance
    """
    if backend == "supabase":
        return SupabaseKeyValueStore()
    if backend == "memory":
        logger.warning("Using in-memory storage; conversations are lost on restart")
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r} (expected 'supabase' or 'memory')")
