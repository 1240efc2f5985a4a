"""
History API Router

Endpoints for browsing and editing translation history.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..services.history_service import HistoryRecord
from ..services.translation_service import TranslationService, get_translation_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("", response_model=List[HistoryRecord])
async def search_history(
    q: Optional[str] = None,
    service: TranslationService = Depends(get_translation_service),
):
    return service.history.search(q)


@router.post("")
async def save_last_translation(service: TranslationService = Depends(get_translation_service)):
    """Save the last completed translation."""
    record_id = service.save_last_translation()
    if record_id is None:
        raise HTTPException(status_code=404, detail="No translation to save")
    return {"id": record_id}


@router.get("/{record_id}", response_model=HistoryRecord)
async def get_history_record(
    record_id: str,
    service: TranslationService = Depends(get_translation_service),
):
    record = service.history.get(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"History record '{record_id}' not found")
    return record


@router.delete("/{record_id}")
async def delete_history_record(
    record_id: str,
    service: TranslationService = Depends(get_translation_service),
):
    if not service.history.remove(record_id):
        raise HTTPException(status_code=404, detail=f"History record '{record_id}' not found")
    return {"message": "History record deleted"}


@router.delete("")
async def clear_history(service: TranslationService = Depends(get_translation_service)):
    service.history.clear()
    return {"message": "History cleared"}
