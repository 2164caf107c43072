"""
Domain layer - Pure business logic with zero framework imports.

This package contains the step-sequencing state machine for the DNS import
wizard: address comparison, step condition evaluators, the step sequencer,
the reducer, and the wizard service that ties them to an item store port.
"""

from .exceptions import (
    DnsImportError,
    ImportAlreadyStarted,
    ImportPathNotChosen,
    OffchainPathUnavailable,
)
from .ports import (
    AddressMatch,
    Facts,
    ImportItem,
    ImportItemRepository,
    ImportPath,
    ItemKey,
    OffchainStatus,
    StepName,
)
from .reducer import (
    Action,
    Advance,
    ChoosePath,
    Remove,
    Reset,
    Retreat,
    SetAuxiliary,
    SetSteps,
    UpdateFacts,
    reduce,
    transition,
)
from .steps import compute_steps
from .wizard import ImportWizardService

__all__ = [
    "Action",
    "AddressMatch",
    "Advance",
    "ChoosePath",
    "DnsImportError",
    "Facts",
    "ImportItem",
    "ImportItemRepository",
    "ImportPath",
    "ImportAlreadyStarted",
    "ImportPathNotChosen",
    "ImportWizardService",
    "ItemKey",
    "OffchainPathUnavailable",
    "OffchainStatus",
    "Remove",
    "Reset",
    "Retreat",
    "SetAuxiliary",
    "SetSteps",
    "StepName",
    "UpdateFacts",
    "compute_steps",
    "reduce",
    "transition",
]
