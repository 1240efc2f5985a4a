"""
Models API Router

Provider and model listing endpoints.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from llm_translate.providers.errors import UnsupportedProviderError
from llm_translate.providers.types import ModelInfo

from ..services.translation_service import TranslationService, get_translation_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["models"])


@router.get("/providers", response_model=List[str])
async def list_providers(service: TranslationService = Depends(get_translation_service)):
    """Built-in provider ids plus ``custom-<id>`` for each custom endpoint."""
    custom = [f"custom-{endpoint.id}" for endpoint in service.settings.get_custom_endpoints()]
    return service.registry.available_providers() + custom


@router.get("/models/{provider_id}", response_model=List[ModelInfo])
async def list_models(
    provider_id: str,
    service: TranslationService = Depends(get_translation_service),
):
    """List models for a provider; falls back to the static list on failure."""
    try:
        return await service.fetch_models(provider_id)
    except UnsupportedProviderError as e:
        raise HTTPException(status_code=404, detail=e.message)
