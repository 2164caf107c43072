"""
Unit tests for InMemoryImportItemRepository adapter.

Tests verify the adapter implements the ImportItemRepository protocol
and applies transitions with the store semantics the domain expects.
"""

import logging

import pytest

from src.adapters.repository.memory import InMemoryImportItemRepository
from src.domain.ports import ImportItem, ImportItemRepository, ImportPath, ItemKey

KEY = ItemKey.of("example.com", "wallet")


class TestInMemoryRepositoryProtocol:
    """Tests for ImportItemRepository protocol compliance."""

    def test_implements_repository_protocol(self) -> None:
        """InMemoryImportItemRepository satisfies the protocol structurally."""
        repo = InMemoryImportItemRepository()

        def accepts_repository(r: ImportItemRepository) -> None:
            pass

        accepts_repository(repo)
        assert callable(repo.load)
        assert callable(repo.update)
        assert callable(repo.clear)

    def test_no_explicit_inheritance(self) -> None:
        """Uses structural subtyping, not inheritance."""
        assert InMemoryImportItemRepository.__bases__ == (object,)


class TestLoadAndUpdate:
    """Tests for load() and update()."""

    def test_load_unknown_key_returns_none(self) -> None:
        """Keys never dispatched to are not stored."""
        assert InMemoryImportItemRepository().load(KEY) is None

    def test_update_starts_from_default_item(self) -> None:
        """Unknown keys start from a default ImportItem."""
        repo = InMemoryImportItemRepository()
        seen: list[ImportItem] = []

        def record(item: ImportItem) -> ImportItem:
            seen.append(item)
            return item

        repo.update(KEY, record)
        assert seen == [ImportItem()]
        assert repo.load(KEY) == ImportItem()

    def test_update_stores_result(self) -> None:
        """The transition result is stored and returned."""
        repo = InMemoryImportItemRepository()
        chosen = ImportItem(path=ImportPath.ONCHAIN)
        result = repo.update(KEY, lambda item: chosen)
        assert result is chosen
        assert repo.load(KEY) is chosen

    def test_update_returning_none_removes(self) -> None:
        """A transition returning None deletes the item."""
        repo = InMemoryImportItemRepository()
        repo.update(KEY, lambda item: item)
        assert repo.update(KEY, lambda item: None) is None
        assert repo.load(KEY) is None
        assert len(repo) == 0

    def test_failing_transition_leaves_item_unchanged(self) -> None:
        """Exceptions propagate and nothing is written."""
        repo = InMemoryImportItemRepository()
        repo.update(KEY, lambda item: ImportItem(path=ImportPath.ONCHAIN))

        def boom(item: ImportItem) -> ImportItem:
            raise ValueError("boom")

        with pytest.raises(ValueError):
            repo.update(KEY, boom)
        assert repo.load(KEY) == ImportItem(path=ImportPath.ONCHAIN)

    def test_keys_are_independent(self) -> None:
        """Updating one key leaves others alone."""
        repo = InMemoryImportItemRepository()
        other = ItemKey.of("example.org", "wallet")
        repo.update(KEY, lambda item: ImportItem(path=ImportPath.ONCHAIN))
        repo.update(other, lambda item: ImportItem(path=ImportPath.OFFCHAIN))
        assert repo.load(KEY).path is ImportPath.ONCHAIN
        assert repo.load(other).path is ImportPath.OFFCHAIN


class TestClear:
    """Tests for clear()."""

    def test_clear_drops_everything(self, caplog: pytest.LogCaptureFixture) -> None:
        """clear() tears down the whole store and logs the count."""
        repo = InMemoryImportItemRepository()
        repo.update(KEY, lambda item: item)
        repo.update(ItemKey.of("example.org", "wallet"), lambda item: item)

        with caplog.at_level(logging.INFO):
            repo.clear()

        assert len(repo) == 0
        assert "Cleared 2 import item(s)" in caplog.text
