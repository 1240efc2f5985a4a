"""
Ollama Adapter

Adapter for local Ollama models over the native /api/chat endpoint.
"""
import logging
from typing import Any, Dict, List

import httpx

from ..base import BaseLLMAdapter, HttpCall
from ..decoders import OllamaChatDecoder, StreamDecoder
from ..errors import TransportError
from ..prompting import build_chat_messages, resolve_base_url, resolve_model, sampling_params
from ..types import ModelInfo, ProviderConfig, TranslationRequest

logger = logging.getLogger(__name__)


class OllamaAdapter(BaseLLMAdapter):
    """
    Adapter for Ollama local models.

    Responses stream as newline-delimited JSON. No API key is required.
    """

    def build_call(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        stream: bool,
    ) -> HttpCall:
        options: Dict[str, Any] = {}
        for key, value in sampling_params(config).items():
            # Map max_tokens to num_predict
            if key == "max_tokens":
                options["num_predict"] = value
            elif key != "thinking_budget":
                options[key] = value

        return HttpCall(
            url=f"{resolve_base_url(config, self.definition)}/api/chat",
            json={
                "model": resolve_model(config, self.definition),
                "messages": build_chat_messages(request),
                # Ollama streams unless told otherwise
                "stream": stream,
                "options": options,
            },
            headers={"Content-Type": "application/json"},
        )

    def create_decoder(self) -> StreamDecoder:
        return OllamaChatDecoder()

    def parse_response(self, data: Dict[str, Any]) -> tuple[str, str]:
        message = data["message"]
        return message.get("content") or "", message.get("thinking") or ""

    def _connection_error(self, error: httpx.HTTPError, config: ProviderConfig) -> TransportError:
        if isinstance(error, httpx.ConnectError):
            base_url = resolve_base_url(config, self.definition)
            return TransportError(f"Cannot connect to Ollama at {base_url}. Is Ollama running?")
        return super()._connection_error(error, config)

    async def _fetch_model_list(self, config: ProviderConfig) -> List[ModelInfo]:
        data = await self._get_json(f"{resolve_base_url(config, self.definition)}/api/tags")
        names = sorted(m["name"] for m in data.get("models", []) if isinstance(m, dict) and m.get("name"))
        logger.info(f"{self.name} listed {len(names)} models")
        return [ModelInfo(value=name, label=name) for name in names]
