"""Repository adapters - Item store implementations."""

from .memory import InMemoryImportItemRepository
from .postgres import PostgresImportItemRepository, run_migrations

__all__ = ["InMemoryImportItemRepository", "PostgresImportItemRepository", "run_migrations"]
