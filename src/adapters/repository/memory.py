"""
In-memory repository adapter - Implements ImportItemRepository protocol.

Keeps import items in a process-local dict. Used for single-process
deployments (storage_backend=memory) and in tests.
"""

import logging
import threading

from src.domain.ports import ImportItem, ItemKey, ItemTransition

logger = logging.getLogger(__name__)


class InMemoryImportItemRepository:
    """
    Implements ImportItemRepository protocol with a lock-guarded dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    A single lock serializes all updates; transitions are pure and fast.
    """

    def __init__(self) -> None:
        self._items: dict[ItemKey, ImportItem] = {}
        self._lock = threading.Lock()

    def load(self, key: ItemKey) -> ImportItem | None:
        with self._lock:
            return self._items.get(key)

    def update(self, key: ItemKey, transition: ItemTransition) -> ImportItem | None:
        with self._lock:
            current = self._items.get(key, ImportItem())
            updated = transition(current)
            if updated is None:
                self._items.pop(key, None)
            else:
                self._items[key] = updated
            return updated

    def clear(self) -> None:
        with self._lock:
            count = len(self._items)
            self._items.clear()
        logger.info("Cleared %d import item(s)", count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
