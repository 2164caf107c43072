"""
Step sequencer - canonical step list for an import path.

Ordering contract:
- selectType is always first and is never removed
- enableDnssec precedes any ownership verification
- the path's completion step is always last (transaction right before
  completeOnchain)

Only facts relevant to the active path are consulted, so stale answers
from a previously chosen path have no effect.
"""

from .conditions import (
    needs_enable_dnssec,
    needs_verify_offchain_ownership,
    needs_verify_onchain_ownership,
)
from .ports import Facts, ImportPath, StepName


def compute_steps(path: ImportPath, facts: Facts) -> tuple[StepName, ...]:
    """
    Build the ordered step list for a path from the current facts.

    Pure and total: an unset path yields (selectType,) only.

    Args:
        path: Chosen import path
        facts: Latest known facts for the item

    Returns:
        Ordered tuple of steps
    """
    steps = [StepName.SELECT_TYPE]
    if path is ImportPath.UNSET:
        return tuple(steps)

    if needs_enable_dnssec(facts):
        steps.append(StepName.ENABLE_DNSSEC)

    if path is ImportPath.OFFCHAIN:
        if needs_verify_offchain_ownership(facts):
            steps.append(StepName.VERIFY_OFFCHAIN_OWNERSHIP)
        steps.append(StepName.COMPLETE_OFFCHAIN)
    elif path is ImportPath.ONCHAIN:
        if needs_verify_onchain_ownership(facts):
            steps.append(StepName.VERIFY_ONCHAIN_OWNERSHIP)
        steps.append(StepName.TRANSACTION)
        steps.append(StepName.COMPLETE_ONCHAIN)

    return tuple(steps)
