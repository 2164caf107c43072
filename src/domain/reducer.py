"""
Reducer - the single transition function over import items.

Every change to an import item is expressed as one of the action types
below and applied by transition(). Actions form a closed set; adding a new
one without handling it in transition() fails loudly.

Item lifecycle
==============

- Created with defaults on the first action that names a new key
- Mutated only by actions (never edited in place; items are immutable)
- Destroyed by Remove, or by tearing down the whole store

Index rules:
- SetSteps clamps current_step_index to len(steps) - 1 when the list shrinks
- SetSteps only stores lists that start with selectType and end on a
  completion step (or are selectType alone); anything else resets the
  list to [selectType]
- Advance saturates at the last step (advancing past completion is a no-op)
- Retreat saturates at 0

Neither ChoosePath nor UpdateFacts recomputes steps. Recomputation is an
explicit SetSteps, issued when the user navigates, so the step list does
not change under the user while facts trickle in.
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .ports import DEFAULT_STEPS, TERMINAL_STEPS, ImportItem, ImportPath, ItemKey, StepName


@dataclass(frozen=True)
class ChoosePath:
    key: ItemKey
    path: ImportPath


@dataclass(frozen=True)
class SetSteps:
    key: ItemKey
    steps: tuple[StepName, ...]


@dataclass(frozen=True)
class Advance:
    key: ItemKey


@dataclass(frozen=True)
class Retreat:
    key: ItemKey


@dataclass(frozen=True)
class UpdateFacts:
    """Merge the named Facts fields; fields not present are left untouched."""

    key: ItemKey
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SetAuxiliary:
    """Merge per-item auxiliary values (e.g. a submitted transaction hash)."""

    key: ItemKey
    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Reset:
    key: ItemKey


@dataclass(frozen=True)
class Remove:
    key: ItemKey


Action = Union[ChoosePath, SetSteps, Advance, Retreat, UpdateFacts, SetAuxiliary, Reset, Remove]


def _last_index(item: ImportItem) -> int:
    return len(item.steps) - 1


def _is_well_formed(steps: tuple[StepName, ...]) -> bool:
    # selectType alone, or selectType ... terminal completion step
    if not steps or steps[0] != StepName.SELECT_TYPE:
        return False
    return len(steps) == 1 or steps[-1] in TERMINAL_STEPS


def transition(item: ImportItem, action: Action) -> ImportItem | None:
    """
    Apply one action to one item.

    Args:
        item: Current item (a default ImportItem for unknown keys)
        action: Action to apply

    Returns:
        The next item, or None if the action removes it

    Raises:
        TypeError: If action is not one of the known action types
    """
    if isinstance(action, ChoosePath):
        return dataclasses.replace(item, path=action.path)

    if isinstance(action, SetSteps):
        steps = tuple(action.steps)
        if not _is_well_formed(steps):
            steps = DEFAULT_STEPS
        index = min(item.current_step_index, len(steps) - 1)
        return dataclasses.replace(item, steps=steps, current_step_index=index)

    if isinstance(action, Advance):
        index = min(item.current_step_index + 1, _last_index(item))
        return dataclasses.replace(item, current_step_index=index)

    if isinstance(action, Retreat):
        return dataclasses.replace(item, current_step_index=max(item.current_step_index - 1, 0))

    if isinstance(action, UpdateFacts):
        # Unknown field names raise TypeError from dataclasses.replace
        return dataclasses.replace(item, facts=dataclasses.replace(item.facts, **action.changes))

    if isinstance(action, SetAuxiliary):
        return dataclasses.replace(item, auxiliary={**item.auxiliary, **action.values})

    if isinstance(action, Reset):
        return ImportItem(facts=item.facts)

    if isinstance(action, Remove):
        return None

    raise TypeError(f"Unknown import action: {type(action).__name__}")


def reduce(items: Mapping[ItemKey, ImportItem], action: Action) -> dict[ItemKey, ImportItem]:
    """
    Apply an action to a whole item mapping.

    The input mapping is not modified. Items under other keys are carried
    over unchanged.

    Args:
        items: Current item store snapshot
        action: Action to apply

    Returns:
        New item store snapshot
    """
    result = dict(items)
    current = result.get(action.key, ImportItem())
    updated = transition(current, action)
    if updated is None:
        result.pop(action.key, None)
    else:
        result[action.key] = updated
    return result
