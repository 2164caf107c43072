"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Wizard actions are a tagged union discriminated by the "action" field.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, RootModel

from src.domain.ports import AddressMatch, ImportItem, ImportPath, ItemKey, StepName


class OffchainStatusModel(BaseModel):
    """Offchain verification status reported by the DNS lookup."""

    resolver_match: AddressMatch = AddressMatch.ABSENT
    address_match: AddressMatch = AddressMatch.ABSENT


class FactsModel(BaseModel):
    """
    Fact snapshot or partial fact update.

    In an update, only fields present in the request body are merged;
    an explicit null marks a fact as unknown again.
    """

    dnssec_enabled: bool | None = None
    dns_owner_address: str | None = None
    offchain_status: OffchainStatusModel | None = None
    connected_address: str | None = None
    parent_resolver_address: str | None = None


class ChoosePathRequest(BaseModel):
    action: Literal["choosePath"]
    path: ImportPath


class AdvanceRequest(BaseModel):
    action: Literal["advance"]


class RetreatRequest(BaseModel):
    action: Literal["retreat"]


class UpdateFactsRequest(BaseModel):
    action: Literal["updateFacts"]
    facts: FactsModel


class SetAuxiliaryRequest(BaseModel):
    action: Literal["setAuxiliary"]
    values: dict[str, Any]


class ResetRequest(BaseModel):
    action: Literal["reset"]


ActionRequest = Annotated[
    Union[
        ChoosePathRequest,
        AdvanceRequest,
        RetreatRequest,
        UpdateFactsRequest,
        SetAuxiliaryRequest,
        ResetRequest,
    ],
    Field(discriminator="action"),
]


class ActionEnvelope(RootModel[ActionRequest]):
    """Request body for the actions endpoint; the action itself is in .root."""


class ImportItemResponse(BaseModel):
    """Current state of one import item."""

    name: str
    discriminator: str
    path: ImportPath
    steps: list[StepName]
    current_step_index: int
    current_step: StepName
    is_complete: bool
    facts: FactsModel
    auxiliary: dict[str, Any]

    @classmethod
    def from_item(cls, key: ItemKey, item: ImportItem) -> "ImportItemResponse":
        facts = item.facts
        offchain_status = None
        if facts.offchain_status is not None:
            offchain_status = OffchainStatusModel(
                resolver_match=facts.offchain_status.resolver_match,
                address_match=facts.offchain_status.address_match,
            )
        return cls(
            name=key.name,
            discriminator=key.discriminator,
            path=item.path,
            steps=list(item.steps),
            current_step_index=item.current_step_index,
            current_step=item.current_step,
            is_complete=item.is_complete,
            facts=FactsModel(
                dnssec_enabled=facts.dnssec_enabled,
                dns_owner_address=facts.dns_owner_address,
                offchain_status=offchain_status,
                connected_address=facts.connected_address,
                parent_resolver_address=facts.parent_resolver_address,
            ),
            auxiliary=dict(item.auxiliary),
        )


class EligibilityResponse(BaseModel):
    """Whether the offchain import path can be chosen."""

    name: str
    chain_id: int
    offchain_eligible: bool


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
