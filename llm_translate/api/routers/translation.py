"""
Translation API Router

Provides the streaming translation endpoint and cancellation.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from llm_translate.providers.errors import UnsupportedProviderError
from llm_translate.providers.registry import CUSTOM_PREFIX

from ..services.translation_service import TranslationService, get_translation_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["translation"])


class TranslateRequest(BaseModel):
    """Request model for translation endpoint."""
    text: str
    provider: Optional[str] = None
    model: Optional[str] = None
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    streaming: Optional[bool] = None


class QueueView:
    """Forwards translation output to an SSE queue."""

    def __init__(self, queue: "asyncio.Queue[Optional[Dict[str, Any]]]"):
        self._queue = queue
        self.failed = False

    def show_content(self, text: str) -> None:
        self._queue.put_nowait({"type": "content", "text": text})

    def show_reasoning(self, text: str) -> None:
        self._queue.put_nowait({"type": "reasoning", "text": text})

    def show_error(self, message: str) -> None:
        self.failed = True
        self._queue.put_nowait({"type": "error", "message": message})


def _sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False, default=str)}\n\n"


def _check_provider(service: TranslationService, provider_id: str) -> None:
    """Reject unknown provider ids before they are saved as the selection."""
    try:
        service.registry.definition(provider_id)
    except UnsupportedProviderError as e:
        raise HTTPException(status_code=400, detail=e.message)
    if provider_id.startswith(CUSTOM_PREFIX):
        endpoint_id = provider_id[len(CUSTOM_PREFIX):]
        if service.settings.get_custom_endpoint(endpoint_id) is None:
            raise HTTPException(status_code=400, detail=f"Unknown custom endpoint: {endpoint_id}")


@router.post("/translate")
async def translate_text(
    request: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
):
    """Translate text, streaming progress as Server-Sent Events.

    Events carry ``type`` ``content``/``reasoning`` (accumulated text),
    ``done``, ``error`` or ``cancelled``.
    """
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text cannot be empty")

    if request.provider is not None:
        _check_provider(service, request.provider)

    selection = {
        key: value
        for key, value in {
            "provider": request.provider,
            "model": request.model,
            "source_lang": request.source_lang,
            "target_lang": request.target_lang,
        }.items()
        if value is not None
    }
    if selection:
        service.settings.update(selection)

    queue: "asyncio.Queue[Optional[Dict[str, Any]]]" = asyncio.Queue()
    view = QueueView(queue)

    async def event_generator():
        task = asyncio.create_task(
            service.translate(request.text, view=view, streaming=request.streaming)
        )
        task.add_done_callback(lambda _: queue.put_nowait(None))
        try:
            while True:
                item = await queue.get()
                if item is None:
                    break
                yield _sse(item)

            result = task.result()
            if result is not None:
                yield _sse({
                    "type": "done",
                    "text": result.target_text,
                    "reasoning": result.reasoning,
                    "provider": result.provider,
                    "model": result.model,
                })
            elif not view.failed:
                yield _sse({"type": "cancelled"})
        except Exception as e:
            logger.error(f"Translation error: {str(e)}", exc_info=True)
            yield _sse({"type": "error", "message": str(e)})
        finally:
            # Client went away mid-stream
            if not task.done():
                service.cancel()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.post("/translate/cancel")
async def cancel_translation(service: TranslationService = Depends(get_translation_service)):
    """Cancel the in-flight translation, if any."""
    return {"cancelled": service.cancel()}


@router.get("/translate/state")
async def translation_state(service: TranslationService = Depends(get_translation_service)):
    return {"state": service.state.value, "active": service.is_active}
