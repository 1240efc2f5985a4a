"""
Text Tools API Router

Role-play placeholder conversion.
"""
import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from llm_translate.utils.text_replace import replace_placeholders

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/text", tags=["text"])


class PlaceholderRequest(BaseModel):
    """Text with ``{{user}}`` / ``{{char}}`` placeholders and their replacements."""
    text: str
    user: Optional[str] = None
    char: Optional[str] = None


class PlaceholderResponse(BaseModel):
    text: str


@router.post("/replace-placeholders", response_model=PlaceholderResponse)
async def replace_text_placeholders(request: PlaceholderRequest):
    """Replace placeholders case-insensitively; an empty replacement keeps its placeholder."""
    return PlaceholderResponse(text=replace_placeholders(request.text, user=request.user, char=request.char))
