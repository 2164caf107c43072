"""
API v1 routes.

Defines REST endpoints for the DNS import wizard. Clients push facts as
their lookups resolve and drive navigation through actions; every response
carries the item's current step list and position.

Every item endpoint is served at /imports/{name}/{discriminator} and, for
imports tracked without a discriminator, at /imports/{name}.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.dependencies import get_item_key, get_wizard_service
from src.api.models import (
    ActionEnvelope,
    ActionRequest,
    AdvanceRequest,
    ChoosePathRequest,
    EligibilityResponse,
    ErrorResponse,
    ImportItemResponse,
    ResetRequest,
    RetreatRequest,
    SetAuxiliaryRequest,
    UpdateFactsRequest,
)
from src.domain.exceptions import ImportAlreadyStarted, ImportPathNotChosen, OffchainPathUnavailable
from src.domain.ports import ItemKey, OffchainStatus
from src.domain.reducer import Action, Advance, Reset, Retreat, SetAuxiliary
from src.domain.wizard import ImportWizardService

router = APIRouter(tags=["v1"])

ITEM_PATH = "/imports/{name}/{discriminator}"
NAME_PATH = "/imports/{name}"


def to_domain_action(key: ItemKey, request: ActionRequest) -> Action:
    """Translate a plain action request into a reducer action."""
    if isinstance(request, AdvanceRequest):
        return Advance(key=key)
    if isinstance(request, RetreatRequest):
        return Retreat(key=key)
    if isinstance(request, SetAuxiliaryRequest):
        return SetAuxiliary(key=key, values=request.values)
    if isinstance(request, ResetRequest):
        return Reset(key=key)
    raise TypeError(f"Unhandled action request: {type(request).__name__}")


# Registered ahead of the item routes so that /imports/{name}/offchain-eligibility
# is not read as a discriminator.
@router.get(
    f"{ITEM_PATH}/offchain-eligibility",
    response_model=EligibilityResponse,
    summary="Check whether offchain import is available",
)
@router.get(
    f"{NAME_PATH}/offchain-eligibility",
    response_model=EligibilityResponse,
    summary="Check whether offchain import is available",
)
async def offchain_eligibility(
    key: ItemKey = Depends(get_item_key),
    service: ImportWizardService = Depends(get_wizard_service),
) -> EligibilityResponse:
    return EligibilityResponse(
        name=key.name,
        chain_id=service.chain_id,
        offchain_eligible=service.offchain_eligible(key),
    )


@router.get(
    ITEM_PATH,
    response_model=ImportItemResponse,
    summary="Get an import item",
    description="Return the current state of an import. Unknown imports "
    "return the initial state (select type step, no path chosen).",
)
@router.get(
    NAME_PATH,
    response_model=ImportItemResponse,
    summary="Get an import item",
)
async def get_item(
    key: ItemKey = Depends(get_item_key),
    service: ImportWizardService = Depends(get_wizard_service),
) -> ImportItemResponse:
    return ImportItemResponse.from_item(key, service.get_item(key))


@router.post(
    f"{ITEM_PATH}/actions",
    response_model=ImportItemResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Offchain path not available"},
        422: {"description": "Validation error"},
    },
    summary="Dispatch a wizard action",
    description="Apply one action (choosePath, advance, retreat, updateFacts, "
    "setAuxiliary, reset) to an import item.",
)
@router.post(
    f"{NAME_PATH}/actions",
    response_model=ImportItemResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Offchain path not available"},
        422: {"description": "Validation error"},
    },
    summary="Dispatch a wizard action",
)
async def dispatch_action(
    body: ActionEnvelope,
    key: ItemKey = Depends(get_item_key),
    service: ImportWizardService = Depends(get_wizard_service),
) -> ImportItemResponse:
    """
    Dispatch an action against an import item.

    The item is created with defaults if it does not exist yet.
    """
    request_data = body.root
    if isinstance(request_data, ChoosePathRequest):
        try:
            item = service.choose_path(key, request_data.path)
        except OffchainPathUnavailable:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Offchain import is not available for this name",
            ) from None
    elif isinstance(request_data, UpdateFactsRequest):
        changes = request_data.facts.model_dump(exclude_unset=True)
        if changes.get("offchain_status") is not None:
            changes["offchain_status"] = OffchainStatus(**changes["offchain_status"])
        item = service.update_facts(key, **changes)
    else:
        item = service.dispatch(to_domain_action(key, request_data))
    return ImportItemResponse.from_item(key, item)


@router.post(
    f"{ITEM_PATH}/steps",
    response_model=ImportItemResponse,
    summary="Recompute the step list",
    description="Rebuild the step list from the chosen path and the facts "
    "known right now. The current step index is clamped if the list shrinks.",
)
@router.post(
    f"{NAME_PATH}/steps",
    response_model=ImportItemResponse,
    summary="Recompute the step list",
)
async def recompute_steps(
    key: ItemKey = Depends(get_item_key),
    service: ImportWizardService = Depends(get_wizard_service),
) -> ImportItemResponse:
    return ImportItemResponse.from_item(key, service.recompute_steps(key))


@router.post(
    f"{ITEM_PATH}/proceed",
    response_model=ImportItemResponse,
    responses={
        409: {
            "model": ErrorResponse,
            "description": "No import path chosen, or already past the select type step",
        },
    },
    summary="Recompute steps and move to the next step",
)
@router.post(
    f"{NAME_PATH}/proceed",
    response_model=ImportItemResponse,
    responses={
        409: {
            "model": ErrorResponse,
            "description": "No import path chosen, or already past the select type step",
        },
    },
    summary="Recompute steps and move to the next step",
)
async def proceed(
    key: ItemKey = Depends(get_item_key),
    service: ImportWizardService = Depends(get_wizard_service),
) -> ImportItemResponse:
    try:
        item = service.proceed(key)
    except ImportPathNotChosen:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Choose an import path first",
        ) from None
    except ImportAlreadyStarted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Import has already left the select type step",
        ) from None
    return ImportItemResponse.from_item(key, item)


@router.delete(
    ITEM_PATH,
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="End an import session",
)
@router.delete(
    NAME_PATH,
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="End an import session",
)
async def remove_item(
    key: ItemKey = Depends(get_item_key),
    service: ImportWizardService = Depends(get_wizard_service),
) -> Response:
    service.remove(key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
