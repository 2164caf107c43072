"""
Adversarial tests for out-of-order and concurrent fact delivery.

Fact lookups (DNSSEC, DNS owner, offchain status, resolver) resolve
independently and in any order, sometimes more than once. These tests
verify that such delivery never corrupts the step list or the current
step index:
- Any interleaving of the same final facts converges to the same steps
- Repeated deliveries are harmless
- Concurrent dispatches against one key are serialized
- Concurrent dispatches against different keys do not interfere
"""

import itertools
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.adapters.repository.memory import InMemoryImportItemRepository
from src.domain.ports import (
    AddressMatch,
    ImportItem,
    ImportPath,
    ItemKey,
    OffchainStatus,
    StepName,
)
from src.domain.reducer import Advance, ChoosePath, UpdateFacts, reduce
from src.domain.steps import compute_steps
from src.domain.wizard import ImportWizardService

WALLET = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
MAINNET_RESOLVER = "0xF142B308cF687d4358410a4cB885513b30A42025"

# Apply adversarial marker to all tests in this module
pytestmark = pytest.mark.adversarial

FACT_UPDATES = [
    {"dnssec_enabled": True},
    {"dns_owner_address": WALLET.lower()},
    {"connected_address": WALLET},
    {"parent_resolver_address": MAINNET_RESOLVER},
    {
        "offchain_status": OffchainStatus(
            resolver_match=AddressMatch.MATCHING, address_match=AddressMatch.MATCHING
        )
    },
]


class TestOutOfOrderDelivery:
    """Fact merges commute; the final step list is order-independent."""

    @pytest.mark.parametrize("path", [ImportPath.ONCHAIN, ImportPath.OFFCHAIN])
    def test_every_interleaving_converges(self, key: ItemKey, path: ImportPath) -> None:
        """All 120 delivery orders yield identical facts and steps."""
        results = set()
        for order in itertools.permutations(FACT_UPDATES):
            items = reduce({}, ChoosePath(key=key, path=path))
            for changes in order:
                items = reduce(items, UpdateFacts(key=key, changes=changes))
            item = items[key]
            results.add((item.facts, compute_steps(item.path, item.facts)))

        assert len(results) == 1

    def test_repeated_delivery_is_harmless(self, key: ItemKey) -> None:
        """Delivering each fact twice changes nothing."""
        once = reduce({}, ChoosePath(key=key, path=ImportPath.ONCHAIN))
        for changes in FACT_UPDATES:
            once = reduce(once, UpdateFacts(key=key, changes=changes))

        twice = dict(once)
        for changes in FACT_UPDATES + FACT_UPDATES:
            twice = reduce(twice, UpdateFacts(key=key, changes=changes))

        assert once == twice

    def test_partial_delivery_is_fail_closed(self, key: ItemKey) -> None:
        """Every prefix of the deliveries keeps unconfirmed steps required."""
        items = reduce({}, ChoosePath(key=key, path=ImportPath.ONCHAIN))
        for changes in FACT_UPDATES[:2]:
            items = reduce(items, UpdateFacts(key=key, changes=changes))
            item = items[key]
            steps = compute_steps(item.path, item.facts)
            # Connected wallet unknown so far: ownership is unconfirmed
            assert StepName.VERIFY_ONCHAIN_OWNERSHIP in steps


class TestConcurrentDispatch:
    """Concurrent dispatches through the wizard service."""

    def test_concurrent_fact_updates_all_applied(
        self, service: ImportWizardService, key: ItemKey
    ) -> None:
        """Simultaneous fact deliveries all land; none is lost."""
        service.choose_path(key, ImportPath.ONCHAIN)
        barrier = threading.Barrier(len(FACT_UPDATES))

        def deliver(changes: dict) -> None:
            barrier.wait()
            service.update_facts(key, **changes)

        with ThreadPoolExecutor(max_workers=len(FACT_UPDATES)) as executor:
            for future in [executor.submit(deliver, changes) for changes in FACT_UPDATES]:
                future.result()

        item = service.recompute_steps(key)
        assert item.steps == (
            StepName.SELECT_TYPE,
            StepName.TRANSACTION,
            StepName.COMPLETE_ONCHAIN,
        )

    def test_concurrent_advances_stay_in_bounds(
        self, service: ImportWizardService, key: ItemKey
    ) -> None:
        """A burst of advances never pushes the index past the last step."""
        service.choose_path(key, ImportPath.ONCHAIN)
        service.recompute_steps(key)
        num_clicks = 50

        with ThreadPoolExecutor(max_workers=10) as executor:
            for future in [executor.submit(service.dispatch, Advance(key=key)) for _ in range(num_clicks)]:
                future.result()

        item = service.get_item(key)
        assert item.current_step_index == len(item.steps) - 1
        assert item.current_step is StepName.COMPLETE_ONCHAIN

    def test_recompute_racing_fact_updates_keeps_index_valid(
        self, service: ImportWizardService, key: ItemKey
    ) -> None:
        """Recomputes interleaved with fact changes never leave a dangling index."""
        service.choose_path(key, ImportPath.ONCHAIN)
        service.recompute_steps(key)
        for _ in range(10):
            service.dispatch(Advance(key=key))

        def flip(value: bool) -> None:
            service.update_facts(key, dnssec_enabled=value)
            service.recompute_steps(key)

        with ThreadPoolExecutor(max_workers=8) as executor:
            for future in [executor.submit(flip, i % 2 == 0) for i in range(40)]:
                future.result()

        item = service.get_item(key)
        assert 0 <= item.current_step_index < len(item.steps)

    def test_items_do_not_interfere(self, repository: InMemoryImportItemRepository) -> None:
        """Concurrent work on different names stays separate."""
        service = ImportWizardService(repository=repository, offchain_resolvers={}, chain_id=1)
        names = [f"name{i}.com" for i in range(20)]

        def run(name: str) -> None:
            item_key = ItemKey.of(name, WALLET)
            service.choose_path(item_key, ImportPath.ONCHAIN)
            service.update_facts(item_key, dnssec_enabled=True)
            service.proceed(item_key)

        with ThreadPoolExecutor(max_workers=10) as executor:
            for future in [executor.submit(run, name) for name in names]:
                future.result()

        assert len(repository) == len(names)
        for name in names:
            item = repository.load(ItemKey.of(name, WALLET))
            assert item is not None
            assert item != ImportItem()
            assert item.current_step is StepName.VERIFY_ONCHAIN_OWNERSHIP
