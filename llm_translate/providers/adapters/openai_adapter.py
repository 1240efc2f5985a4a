"""
Chat-Completions Adapter

Adapter for OpenAI and every server speaking the same chat-completions
protocol (llama.cpp, custom OpenAI-compatible endpoints).
"""
import logging
from typing import Any, Dict, List

from ..base import BaseLLMAdapter, HttpCall
from ..decoders import ChatCompletionsDecoder, StreamDecoder
from ..prompting import build_chat_messages, resolve_base_url, resolve_model, sampling_params
from ..types import ModelInfo, ProviderConfig, TranslationRequest

logger = logging.getLogger(__name__)

# Parameters with no chat-completions counterpart
_UNSUPPORTED_PARAMS = ("thinking_budget", "top_k")


class OpenAIAdapter(BaseLLMAdapter):
    """
    Adapter for chat-completions endpoints.

    Streams ``data:`` events terminated by ``[DONE]``. Native
    ``reasoning_content`` deltas and inline ``<think>`` markup both end up
    in the reasoning buffer.
    """

    def _api_root(self, config: ProviderConfig) -> str:
        return resolve_base_url(config, self.definition) + self.definition.url_suffix

    def _headers(self, config: ProviderConfig) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        # Local servers usually run without a key
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        return headers

    def build_call(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        stream: bool,
    ) -> HttpCall:
        body: Dict[str, Any] = {"messages": build_chat_messages(request)}
        model = resolve_model(config, self.definition)
        if model:
            body["model"] = model

        for key, value in sampling_params(config).items():
            if key not in _UNSUPPORTED_PARAMS:
                body[key] = value
        if stream:
            body["stream"] = True

        return HttpCall(
            url=f"{self._api_root(config)}/chat/completions",
            json=body,
            headers=self._headers(config),
        )

    def create_decoder(self) -> StreamDecoder:
        return ChatCompletionsDecoder()

    def parse_response(self, data: Dict[str, Any]) -> tuple[str, str]:
        message = data["choices"][0]["message"]
        return message.get("content") or "", message.get("reasoning_content") or ""

    async def _fetch_model_list(self, config: ProviderConfig) -> List[ModelInfo]:
        if self.definition.requires_api_key and not config.api_key:
            return []
        if not resolve_base_url(config, self.definition):
            return []

        headers = {}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        data = await self._get_json(f"{self._api_root(config)}/models", headers=headers)
        model_ids = [m["id"] for m in data.get("data", []) if isinstance(m, dict) and m.get("id")]
        logger.info(f"{self.name} listed {len(model_ids)} models")
        return self._filter_models(model_ids)
