"""
Import wizard domain service.

Wires the reducer, condition evaluators and step sequencer to an item
repository. Facts are pushed in by callers (the DNS and chain lookups live
outside this service); the service never performs lookups itself.

Navigation model
================

The select-type step ends with proceed(): steps are recomputed from the
facts known at that moment and the item advances in the same atomic
update. Later fact updates do not reshape the step list until steps are
recomputed again with recompute_steps(). proceed() is refused once the
item has left the select-type step.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .conditions import is_offchain_eligible
from .exceptions import ImportAlreadyStarted, ImportPathNotChosen, OffchainPathUnavailable
from .ports import ImportItem, ImportItemRepository, ImportPath, ItemKey
from .reducer import (
    Action,
    Advance,
    ChoosePath,
    Remove,
    SetSteps,
    UpdateFacts,
    transition,
)
from .steps import compute_steps

logger = logging.getLogger(__name__)


@dataclass
class ImportWizardService:
    """
    Domain service for DNS import wizard sessions.

    Attributes:
        repository: Item store
        offchain_resolvers: Network identifier -> offchain resolver address
        chain_id: Active network identifier
    """

    repository: ImportItemRepository
    offchain_resolvers: Mapping[str, str]
    chain_id: int

    def get_item(self, key: ItemKey) -> ImportItem:
        """Return the stored item, or the default item for an unknown key."""
        item = self.repository.load(key)
        return item if item is not None else ImportItem()

    def dispatch(self, action: Action) -> ImportItem | None:
        """
        Apply an action atomically to the item it names.

        Args:
            action: Reducer action

        Returns:
            Item after the action, or None if the action removed it
        """
        logger.debug("Dispatching %s for %s", type(action).__name__, action.key)
        return self.repository.update(action.key, lambda item: transition(item, action))

    def _is_eligible(self, item: ImportItem) -> bool:
        return is_offchain_eligible(
            item.facts.parent_resolver_address, self.chain_id, self.offchain_resolvers
        )

    def offchain_eligible(self, key: ItemKey) -> bool:
        """Whether the offchain path can be chosen given the item's known resolver."""
        return self._is_eligible(self.get_item(key))

    def choose_path(self, key: ItemKey, path: ImportPath) -> ImportItem:
        """
        Set the import path for an item.

        Eligibility is checked against the item inside the same atomic
        update that stores the path.

        Raises:
            OffchainPathUnavailable: If offchain is requested but the parent
                zone resolver is not the network's offchain resolver
        """

        def _choose(item: ImportItem) -> ImportItem | None:
            if path is ImportPath.OFFCHAIN and not self._is_eligible(item):
                raise OffchainPathUnavailable(key.name)
            return transition(item, ChoosePath(key=key, path=path))

        item = self.repository.update(key, _choose)
        logger.info("Import path for %s set to %s", key.name, path.value)
        return item

    def update_facts(self, key: ItemKey, **changes: Any) -> ImportItem:
        """Merge newly arrived facts without touching the step list."""
        return self.dispatch(UpdateFacts(key=key, changes=changes))

    def recompute_steps(self, key: ItemKey) -> ImportItem:
        """Recompute the step list from the item's current path and facts."""

        def _recompute(item: ImportItem) -> ImportItem | None:
            steps = compute_steps(item.path, item.facts)
            return transition(item, SetSteps(key=key, steps=steps))

        item = self.repository.update(key, _recompute)
        logger.info("Steps for %s recomputed: %s", key.name, [step.value for step in item.steps])
        return item

    def proceed(self, key: ItemKey) -> ImportItem:
        """
        Leave the select-type step: recompute steps, then advance.

        Only valid while the item is still on the select-type step. Later
        steps move with Advance, after an optional recompute_steps().

        Raises:
            ImportPathNotChosen: If no import path has been chosen yet
            ImportAlreadyStarted: If the item is past the select-type step
        """

        def _proceed(item: ImportItem) -> ImportItem | None:
            if item.current_step_index != 0:
                raise ImportAlreadyStarted(key.name)
            if item.path is ImportPath.UNSET:
                raise ImportPathNotChosen(key.name)
            steps = compute_steps(item.path, item.facts)
            item = transition(item, SetSteps(key=key, steps=steps))
            return transition(item, Advance(key=key))

        item = self.repository.update(key, _proceed)
        logger.info("Import of %s moved to step %s", key.name, item.current_step.value)
        return item

    def remove(self, key: ItemKey) -> None:
        """End the wizard session for an item."""
        self.dispatch(Remove(key=key))
        logger.info("Import item for %s removed", key.name)
