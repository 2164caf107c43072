"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
the wizard service and item repository into routes.
"""

from fastapi import Depends, Request

from src.config.settings import Settings, get_settings
from src.domain.ports import ImportItemRepository, ItemKey
from src.domain.wizard import ImportWizardService


def get_repository(request: Request) -> ImportItemRepository:
    """
    Get item repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_wizard_service(
    repository: ImportItemRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> ImportWizardService:
    """
    Create wizard service with injected dependencies.

    Wires together the repository and the per-network offchain resolver
    allow-list for the domain service.
    """
    return ImportWizardService(
        repository=repository,
        offchain_resolvers=settings.offchain_resolvers,
        chain_id=settings.chain_id,
    )


def get_item_key(name: str, discriminator: str = "") -> ItemKey:
    """
    Build a normalized item key from the path parameters.

    Routes without a {discriminator} segment address the key with an
    empty discriminator.
    """
    return ItemKey.of(name, discriminator)
