"""
Port interfaces and domain types for the DNS import wizard.

This module defines the value types that flow through the step sequencer
and the interface (port) the domain requires from item storage.
Adapters implement these protocols.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol


class ImportPath(str, Enum):
    """
    Import path chosen by the user on the select-type step.

    - OFFCHAIN: designated resolver plus off-ledger record verification
    - ONCHAIN: concludes with a ledger transaction claiming the name
    - UNSET: nothing chosen yet
    """

    OFFCHAIN = "offchain"
    ONCHAIN = "onchain"
    UNSET = "unset"


class StepName(str, Enum):
    """Wizard steps, in the order they can appear."""

    SELECT_TYPE = "selectType"
    ENABLE_DNSSEC = "enableDnssec"
    VERIFY_OFFCHAIN_OWNERSHIP = "verifyOffchainOwnership"
    COMPLETE_OFFCHAIN = "completeOffchain"
    VERIFY_ONCHAIN_OWNERSHIP = "verifyOnchainOwnership"
    TRANSACTION = "transaction"
    COMPLETE_ONCHAIN = "completeOnchain"


class AddressMatch(str, Enum):
    """
    Result of comparing two addresses.

    ABSENT means "not yet known" (missing or malformed input) and must
    never be read as a mismatch.
    """

    MATCHING = "matching"
    MISMATCHING = "mismatching"
    ABSENT = "absent"


@dataclass(frozen=True)
class ItemKey:
    """Stable identity of one import attempt."""

    name: str
    discriminator: str

    @classmethod
    def of(cls, name: str, discriminator: str = "") -> "ItemKey":
        """Build a key with normalized (stripped, lowercased) parts."""
        return cls(name=name.strip().lower(), discriminator=discriminator.strip().lower())


@dataclass(frozen=True)
class OffchainStatus:
    """Offchain verification status as reported by the DNS lookup."""

    resolver_match: AddressMatch = AddressMatch.ABSENT
    address_match: AddressMatch = AddressMatch.ABSENT


@dataclass(frozen=True)
class Facts:
    """
    Latest known asynchronous answers for one item.

    None on any field means the answer has not arrived yet.
    """

    dnssec_enabled: bool | None = None
    dns_owner_address: str | None = None
    offchain_status: OffchainStatus | None = None
    connected_address: str | None = None
    parent_resolver_address: str | None = None


DEFAULT_STEPS: tuple[StepName, ...] = (StepName.SELECT_TYPE,)
TERMINAL_STEPS = frozenset({StepName.COMPLETE_OFFCHAIN, StepName.COMPLETE_ONCHAIN})


@dataclass(frozen=True)
class ImportItem:
    """
    State of one import attempt.

    Instances are immutable; the reducer produces a new item per action.
    Auxiliary data is held as a read-only copy and does not take part in
    hashing.
    """

    path: ImportPath = ImportPath.UNSET
    steps: tuple[StepName, ...] = DEFAULT_STEPS
    current_step_index: int = 0
    facts: Facts = field(default_factory=Facts)
    auxiliary: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "auxiliary", MappingProxyType(dict(self.auxiliary)))

    @property
    def current_step(self) -> StepName:
        """Step the user is currently on."""
        return self.steps[self.current_step_index]

    @property
    def is_complete(self) -> bool:
        """True once the user reached the terminal step of a chosen path."""
        return self.current_step in TERMINAL_STEPS


# Per-item transition applied atomically by a repository. Returning None
# removes the item.
ItemTransition = Callable[[ImportItem], ImportItem | None]


class ImportItemRepository(Protocol):
    """Port interface for import item storage (the Item Store)."""

    def load(self, key: ItemKey) -> ImportItem | None:
        """
        Fetch the stored item for a key.

        Args:
            key: Item identity

        Returns:
            The stored item, or None if the key has never been dispatched to
        """
        ...

    def update(self, key: ItemKey, transition: ItemTransition) -> ImportItem | None:
        """
        Atomically apply a transition to the item stored under a key.

        Unknown keys start from a default ImportItem. If the transition
        returns None the item is deleted. Concurrent updates to the same
        key are serialized.

        Args:
            key: Item identity
            transition: Pure function from current item to next item

        Returns:
            The stored item after the transition, or None if it was removed
        """
        ...

    def clear(self) -> None:
        """Drop every tracked item (session teardown)."""
        ...
