"""
Settings API Router

Endpoints for reading and updating user settings and custom endpoints.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from ..services.settings_service import CustomEndpoint
from ..services.translation_service import TranslationService, get_translation_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/settings", tags=["settings"])


class SettingsUpdate(BaseModel):
    """Dotted-path updates, e.g. ``{"openai.api_key": "sk-..."}``"""
    updates: Dict[str, Any]


class CustomEndpointCreate(BaseModel):
    name: str = "Custom API"
    base_url: str = ""
    api_key: str = ""
    model: str = ""


class CustomEndpointUpdate(BaseModel):
    name: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None


@router.get("")
async def get_settings(service: TranslationService = Depends(get_translation_service)):
    return service.settings.as_dict()


@router.patch("")
async def update_settings(
    update: SettingsUpdate,
    service: TranslationService = Depends(get_translation_service),
):
    if not update.updates:
        raise HTTPException(status_code=400, detail="No updates given")
    return service.settings.update(update.updates)


@router.get("/export")
async def export_settings(service: TranslationService = Depends(get_translation_service)):
    filename = service.settings.export_filename()
    return Response(
        content=service.settings.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_settings(
    data: Dict[str, Any],
    service: TranslationService = Depends(get_translation_service),
):
    try:
        service.settings.import_json(json.dumps(data))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return service.settings.as_dict()


@router.post("/reset-prompts")
async def reset_prompts(service: TranslationService = Depends(get_translation_service)):
    service.settings.reset_prompts()
    return service.settings.get("prompts")


@router.post("/toggle-theme")
async def toggle_theme(service: TranslationService = Depends(get_translation_service)):
    return {"theme": service.settings.toggle_theme()}


@router.post("/swap-languages")
async def swap_languages(service: TranslationService = Depends(get_translation_service)):
    swapped = service.swap_languages()
    return {
        "swapped": swapped,
        "source_lang": service.settings.get("source_lang"),
        "target_lang": service.settings.get("target_lang"),
    }


# ==================== Custom Endpoints ====================

@router.get("/custom-endpoints", response_model=List[CustomEndpoint])
async def list_custom_endpoints(service: TranslationService = Depends(get_translation_service)):
    return service.settings.get_custom_endpoints()


@router.post("/custom-endpoints", response_model=CustomEndpoint)
async def add_custom_endpoint(
    endpoint: CustomEndpointCreate,
    service: TranslationService = Depends(get_translation_service),
):
    return service.settings.add_custom_endpoint(**endpoint.model_dump())


@router.patch("/custom-endpoints/{endpoint_id}", response_model=CustomEndpoint)
async def update_custom_endpoint(
    endpoint_id: str,
    update: CustomEndpointUpdate,
    service: TranslationService = Depends(get_translation_service),
):
    updates = update.model_dump(exclude_none=True)
    if not service.settings.update_custom_endpoint(endpoint_id, updates):
        raise HTTPException(status_code=404, detail=f"Custom endpoint '{endpoint_id}' not found")
    return service.settings.get_custom_endpoint(endpoint_id)


@router.delete("/custom-endpoints/{endpoint_id}")
async def delete_custom_endpoint(
    endpoint_id: str,
    service: TranslationService = Depends(get_translation_service),
):
    if not service.settings.delete_custom_endpoint(endpoint_id):
        raise HTTPException(status_code=404, detail=f"Custom endpoint '{endpoint_id}' not found")
    return {"message": "Custom endpoint deleted"}


@router.post("/custom-endpoints/{endpoint_id}/select")
async def select_custom_endpoint(
    endpoint_id: str,
    service: TranslationService = Depends(get_translation_service),
):
    if service.settings.get_custom_endpoint(endpoint_id) is None:
        raise HTTPException(status_code=404, detail=f"Custom endpoint '{endpoint_id}' not found")
    service.settings.select_custom_endpoint(endpoint_id)
    return {"selected": endpoint_id}
