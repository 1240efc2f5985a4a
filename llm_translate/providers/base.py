"""
Base LLM Adapter

Abstract base class for provider adapters. Subclasses describe one wire
protocol: how to build the HTTP call, which decoder reads the stream and
where the text lives in a complete response. The request/stream/callback
plumbing is shared here.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

import httpx

from .cancellation import CancellationToken
from .decoders import StreamDecoder
from .errors import CancelledError, ConfigurationError, TranslationError, TransportError
from .thinking import ThinkingExtractor, extract_thinking
from .transport import MODEL_LIST_TIMEOUT, STREAM_TIMEOUT, create_client, error_from_response
from .types import (
    ContentDelta,
    Done,
    ErrorEvent,
    ModelInfo,
    ProviderConfig,
    ProviderDefinition,
    ReasoningDelta,
    StreamEvent,
    TranslationRequest,
)

logger = logging.getLogger(__name__)


@dataclass
class StreamCallbacks:
    """Callbacks invoked during streaming translation.

    ``on_content`` and ``on_reasoning`` receive the accumulated text so far,
    never a bare delta.
    """
    on_content: Optional[Callable[[str], None]] = None
    on_reasoning: Optional[Callable[[str], None]] = None
    on_done: Optional[Callable[[str, str], None]] = None
    on_error: Optional[Callable[[TranslationError], None]] = None


@dataclass
class HttpCall:
    """One provider request."""
    url: str
    json: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


class StreamAccumulator:
    """Accumulates deltas into append-only content and reasoning buffers."""

    def __init__(self, inline_thinking: bool = False):
        self._extractor = ThinkingExtractor() if inline_thinking else None
        self.content = ""
        self.reasoning = ""

    def add(self, event: StreamEvent) -> tuple[bool, bool]:
        """Apply one event. Returns (content_changed, reasoning_changed)."""
        if isinstance(event, ReasoningDelta):
            self.reasoning += event.text
            return False, bool(event.text)

        if isinstance(event, ContentDelta):
            if self._extractor is None:
                self.content += event.text
                return bool(event.text), False
            visible, reasoning = self._extractor.feed(event.text)
            self.content += visible
            self.reasoning += reasoning
            return bool(visible), bool(reasoning)

        return False, False

    def finish(self) -> tuple[str, str]:
        if self._extractor is not None:
            visible, reasoning = self._extractor.flush()
            self.content += visible
            self.reasoning += reasoning
        return self.content.strip(), self.reasoning.strip()


class BaseLLMAdapter(ABC):
    """
    Abstract base class for provider adapters.

    One instance serves one provider definition. ``transport`` is passed to
    the underlying ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        definition: ProviderDefinition,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.definition = definition
        self._transport = transport

    @property
    def name(self) -> str:
        return self.definition.name

    @abstractmethod
    def build_call(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        stream: bool,
    ) -> HttpCall:
        """
        Build the HTTP request for this protocol.

        Args:
            request: Text and prompts to send
            config: Provider configuration for this call
            stream: Whether to request a streamed response

        Returns:
            HttpCall describing URL, JSON body, headers and query params
        """
        pass

    @abstractmethod
    def create_decoder(self) -> StreamDecoder:
        """Create a fresh decoder for one streamed response."""
        pass

    @abstractmethod
    def parse_response(self, data: Dict[str, Any]) -> tuple[str, str]:
        """
        Extract (content, reasoning) from a complete non-streaming body.

        May raise KeyError/IndexError/TypeError on unexpected shapes.
        """
        pass

    async def _fetch_model_list(self, config: ProviderConfig) -> List[ModelInfo]:
        """Query the provider for models. Default: no listing endpoint."""
        return []

    def default_models(self) -> List[ModelInfo]:
        return list(self.definition.default_models)

    def validate_config(self, config: ProviderConfig) -> None:
        """Fail before any I/O when a required credential is missing."""
        if self.definition.requires_api_key and not config.api_key:
            raise ConfigurationError(f"{self.name} API key is not configured")
        if self.definition.requires_base_url and not config.base_url:
            raise ConfigurationError(f"{self.name} base URL is not configured")

    def _client(self, timeout: httpx.Timeout = STREAM_TIMEOUT) -> httpx.AsyncClient:
        return create_client(self._transport, timeout)

    async def _get_json(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """GET a JSON object from a model-listing endpoint."""
        async with self._client(MODEL_LIST_TIMEOUT) as client:
            response = await client.get(url, headers=headers, params=params)
        if not response.is_success:
            raise error_from_response(response)
        data = response.json()
        if not isinstance(data, dict):
            raise TransportError(f"Unexpected model listing from {self.name}")
        return data

    def _connection_error(self, error: httpx.HTTPError, config: ProviderConfig) -> TransportError:
        if isinstance(error, httpx.TimeoutException):
            return TransportError(f"{self.name} request timed out")
        return TransportError(f"Could not connect to {self.name}: {error}")

    def _filter_models(self, model_ids: List[str]) -> List[ModelInfo]:
        include = self.definition.model_include
        exclude = self.definition.model_exclude
        selected = [
            model_id
            for model_id in model_ids
            if (not include or any(part in model_id for part in include))
            and not any(part in model_id for part in exclude)
        ]
        selected.sort(reverse=self.definition.model_sort_desc)
        return [ModelInfo(value=model_id, label=model_id) for model_id in selected]

    async def translate(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Translate without streaming.

        Returns:
            Final visible text (reasoning markup removed, whitespace trimmed)
        """
        token = cancel_token or CancellationToken()
        self.validate_config(config)
        token.raise_if_cancelled()

        call = self.build_call(request, config, stream=False)
        logger.info(f"Translating via {self.name} (model={config.model or self.definition.default_model})")
        try:
            async with self._client() as client:
                response = await client.post(
                    call.url,
                    json=call.json,
                    headers=call.headers,
                    params=call.params or None,
                )
        except httpx.HTTPError as e:
            raise self._connection_error(e, config) from e

        token.raise_if_cancelled()
        if not response.is_success:
            raise error_from_response(response)

        try:
            content, _ = self.parse_response(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise TransportError(f"Unexpected response from {self.name}") from e

        if self.definition.inline_thinking:
            content, _ = extract_thinking(content or "")
        return (content or "").strip()

    async def stream(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream normalized events in wire order.

        Yields ContentDelta/ReasoningDelta events and a final Done. Provider
        errors raise TransportError; cancellation raises CancelledError.
        """
        token = cancel_token or CancellationToken()
        self.validate_config(config)
        token.raise_if_cancelled()

        call = self.build_call(request, config, stream=True)
        decoder = self.create_decoder()
        logger.info(f"Streaming translation via {self.name} (model={config.model or self.definition.default_model})")

        try:
            async with self._client() as client:
                async with client.stream(
                    "POST",
                    call.url,
                    json=call.json,
                    headers=call.headers,
                    params=call.params or None,
                ) as response:
                    token.raise_if_cancelled()
                    if not response.is_success:
                        await response.aread()
                        raise error_from_response(response)

                    async for chunk in response.aiter_bytes():
                        token.raise_if_cancelled()
                        for event in decoder.decode(chunk):
                            token.raise_if_cancelled()
                            if isinstance(event, ErrorEvent):
                                raise TransportError(event.message)
                            yield event
                        if decoder.done:
                            return

                    for event in decoder.finish():
                        if isinstance(event, ErrorEvent):
                            raise TransportError(event.message)
                        yield event
        except httpx.HTTPError as e:
            raise self._connection_error(e, config) from e

    async def translate_stream(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        callbacks: Optional[StreamCallbacks] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Translate with streaming callbacks.

        ``on_done`` fires exactly once on success; ``on_error`` fires exactly
        once on failure before the error is raised. Cancellation raises
        CancelledError without calling ``on_error``.

        Returns:
            Final visible text
        """
        callbacks = callbacks or StreamCallbacks()
        accumulator = StreamAccumulator(inline_thinking=self.definition.inline_thinking)

        try:
            async for event in self.stream(request, config, cancel_token):
                if isinstance(event, Done):
                    continue
                content_changed, reasoning_changed = accumulator.add(event)
                if reasoning_changed and callbacks.on_reasoning:
                    callbacks.on_reasoning(accumulator.reasoning)
                if content_changed and callbacks.on_content:
                    callbacks.on_content(accumulator.content)
        except CancelledError:
            logger.info(f"{self.name} stream cancelled")
            raise
        except TranslationError as e:
            logger.error(f"{self.name} translation failed: {e.message}")
            if callbacks.on_error:
                callbacks.on_error(e)
            raise

        content, reasoning = accumulator.finish()
        logger.info(f"{self.name} translation complete: {len(content)} chars")
        if callbacks.on_done:
            callbacks.on_done(content, reasoning)
        return content

    async def fetch_models(self, config: ProviderConfig) -> List[ModelInfo]:
        """
        List models best-effort.

        Any failure, or an empty listing, yields the static fallback list.
        """
        try:
            models = await self._fetch_model_list(config)
        except Exception as e:
            logger.warning(f"Failed to fetch {self.name} models: {e}")
            return self.default_models()
        return models or self.default_models()
