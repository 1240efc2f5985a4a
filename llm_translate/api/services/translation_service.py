"""Translation service: runs one translation at a time through the configured provider."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from llm_translate.providers.base import StreamCallbacks
from llm_translate.providers.cancellation import CancellationToken
from llm_translate.providers.errors import CancelledError, TranslationError
from llm_translate.providers.registry import AdapterRegistry, get_registry
from llm_translate.providers.types import ModelInfo, TranslationRequest

from .history_service import HistoryEntry, HistoryService
from .notifications import LoggingNotifier, Notifier
from .settings_service import SettingsService

logger = logging.getLogger(__name__)

MSG_STOPPED = "Translation stopped."
MSG_EMPTY_INPUT = "Enter text to translate."
MSG_NOTHING_TO_SAVE = "No translation to save."
MSG_SAVED = "Saved to history."
MSG_SWAP_AUTO = "Cannot swap languages while the source language is auto-detect."


class TranslationState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    COMPLETING = "completing"
    CANCELLED = "cancelled"


class TranslationView(Protocol):
    """Receives accumulated output while a translation runs."""

    def show_content(self, text: str) -> None:
        ...

    def show_reasoning(self, text: str) -> None:
        ...

    def show_error(self, message: str) -> None:
        ...


@dataclass
class TranslationResult:
    source_text: str
    target_text: str
    reasoning: str
    source_lang: str
    target_lang: str
    provider: str
    model: str


class TranslationService:
    """
    Orchestrates a single in-flight translation.

    Settings decide provider, model, languages and prompts. Calling
    ``translate`` while a request is active cancels that request instead of
    starting a new one.
    """

    def __init__(
        self,
        settings: Optional[SettingsService] = None,
        history: Optional[HistoryService] = None,
        notifier: Optional[Notifier] = None,
        registry: Optional[AdapterRegistry] = None,
    ):
        self.settings = settings or SettingsService()
        self.history = history or HistoryService()
        self.notifier = notifier or LoggingNotifier()
        self.registry = registry or get_registry()
        self._state = TranslationState.IDLE
        self._token: Optional[CancellationToken] = None
        self.last_translation: Optional[TranslationResult] = None

    @property
    def state(self) -> TranslationState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._token is not None

    def cancel(self) -> bool:
        """Cancel the active request. Returns False when nothing is running."""
        if self._token is None:
            return False
        self._token.cancel()
        self._state = TranslationState.CANCELLED
        logger.info("Translation cancel requested")
        return True

    async def translate(
        self,
        text: str,
        view: Optional[TranslationView] = None,
        streaming: Optional[bool] = None,
    ) -> Optional[TranslationResult]:
        """
        Translate ``text`` with the configured provider.

        Returns:
            The completed translation, or None when the call was refused,
            cancelled or failed (the reason is notified).
        """
        if self.is_active:
            self.cancel()
            self.notifier.notify(MSG_STOPPED)
            return None

        if not text or not text.strip():
            self.notifier.notify(MSG_EMPTY_INPUT)
            return None

        provider_id = self.settings.get("provider")
        if streaming is None:
            streaming = bool(self.settings.get("streaming", True))

        try:
            adapter = self.registry.get(provider_id)
        except TranslationError as e:
            self._report_error(e, view)
            return None

        config = self.settings.get_provider_config(provider_id)
        request = TranslationRequest(
            source_text=text,
            source_lang=self.settings.get("source_lang"),
            target_lang=self.settings.get("target_lang"),
            system_prompt=self.settings.get("prompts.system"),
            user_prompt_template=self.settings.get("prompts.user"),
        )
        model = config.model or adapter.definition.default_model

        token = CancellationToken()
        self._token = token
        self._state = TranslationState.REQUESTING
        logger.info(
            "Translation started: provider=%s model=%s %s->%s streaming=%s",
            provider_id,
            model or "(server default)",
            request.source_lang,
            request.target_lang,
            streaming,
        )

        reasoning = ""
        try:
            if streaming:
                final = {"reasoning": ""}

                def on_content(accumulated: str) -> None:
                    self._state = TranslationState.STREAMING
                    if view is not None:
                        view.show_content(accumulated)

                def on_reasoning(accumulated: str) -> None:
                    self._state = TranslationState.STREAMING
                    if view is not None:
                        view.show_reasoning(accumulated)

                def on_done(content: str, done_reasoning: str) -> None:
                    self._state = TranslationState.COMPLETING
                    final["reasoning"] = done_reasoning
                    if view is not None:
                        view.show_content(content)

                target_text = await adapter.translate_stream(
                    request,
                    config,
                    StreamCallbacks(on_content=on_content, on_reasoning=on_reasoning, on_done=on_done),
                    token,
                )
                reasoning = final["reasoning"]
            else:
                target_text = await adapter.translate(request, config, token)
                self._state = TranslationState.COMPLETING
                if view is not None:
                    view.show_content(target_text)
        except CancelledError:
            logger.info("Translation cancelled")
            return None
        except TranslationError as e:
            self._report_error(e, view)
            return None
        finally:
            if self._token is token:
                self._token = None
                self._state = TranslationState.IDLE

        result = TranslationResult(
            source_text=text,
            target_text=target_text,
            reasoning=reasoning,
            source_lang=request.source_lang,
            target_lang=request.target_lang,
            provider=provider_id,
            model=model,
        )
        self.last_translation = result
        logger.info(f"Translation complete: {len(target_text)} chars")

        if self.settings.get("history.auto_save", False):
            self._append_history(result)
        return result

    def _report_error(self, error: TranslationError, view: Optional[TranslationView]) -> None:
        logger.error(f"Translation failed: {error.message}")
        if view is not None:
            view.show_error(error.message)
        self.notifier.notify(error.message)

    def _append_history(self, result: TranslationResult) -> str:
        return self.history.append(
            HistoryEntry(
                source_lang=result.source_lang,
                target_lang=result.target_lang,
                source_text=result.source_text,
                target_text=result.target_text,
                provider=result.provider,
                model=result.model,
            )
        )

    def save_last_translation(self) -> Optional[str]:
        """Append the last completed translation to history."""
        if self.last_translation is None or not self.last_translation.target_text:
            self.notifier.notify(MSG_NOTHING_TO_SAVE)
            return None
        record_id = self._append_history(self.last_translation)
        self.notifier.notify(MSG_SAVED)
        return record_id

    async def fetch_models(self, provider_id: Optional[str] = None) -> List[ModelInfo]:
        """Model listing for a provider (default: the selected one)."""
        provider_id = provider_id or self.settings.get("provider")
        config = self.settings.get_provider_config(provider_id)
        return await self.registry.fetch_models(provider_id, config)

    def swap_languages(self) -> bool:
        source = self.settings.get("source_lang")
        target = self.settings.get("target_lang")
        if source == "auto":
            self.notifier.notify(MSG_SWAP_AUTO)
            return False

        self.settings.set("source_lang", target)
        self.settings.set("target_lang", source)
        self.settings.persist()
        return True


_service: Optional[TranslationService] = None


def get_translation_service() -> TranslationService:
    """Process-wide TranslationService shared by the API routers."""
    global _service
    if _service is None:
        from ..config import settings

        _service = TranslationService(
            settings=SettingsService(str(settings.settings_file) if settings.settings_file else None),
            history=HistoryService(
                str(settings.history_file) if settings.history_file else None,
                max_items=settings.max_history_items,
            ),
        )
    return _service
