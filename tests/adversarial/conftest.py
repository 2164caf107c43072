"""
Shared fixtures for adversarial tests.

Provides the store and service used by the out-of-order delivery and
concurrent dispatch tests.
"""

import pytest

from src.adapters.repository.memory import InMemoryImportItemRepository
from src.domain.ports import ItemKey
from src.domain.wizard import ImportWizardService

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial

WALLET = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
MAINNET_RESOLVER = "0xF142B308cF687d4358410a4cB885513b30A42025"


@pytest.fixture
def key() -> ItemKey:
    return ItemKey.of("example.com", WALLET)


@pytest.fixture
def repository() -> InMemoryImportItemRepository:
    """Fresh in-memory store for each test."""
    return InMemoryImportItemRepository()


@pytest.fixture
def service(repository: InMemoryImportItemRepository) -> ImportWizardService:
    """Wizard service on mainnet with the default offchain resolver."""
    return ImportWizardService(
        repository=repository,
        offchain_resolvers={"1": MAINNET_RESOLVER},
        chain_id=1,
    )
