"""
Anthropic Messages Adapter

Adapter for Claude models over the Messages API. Streaming requests enable
extended thinking so reasoning arrives as ``thinking_delta`` events.
"""
import logging
from typing import Any, Dict

from ..base import BaseLLMAdapter, HttpCall
from ..decoders import MessagesEventDecoder, StreamDecoder
from ..prompting import build_user_prompt, resolve_base_url, resolve_model, sampling_params
from ..types import ProviderConfig, TranslationRequest

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
MAX_TOKENS = 4096
STREAM_MAX_TOKENS = 16000
DEFAULT_THINKING_BUDGET = 8000


class AnthropicAdapter(BaseLLMAdapter):
    """
    Adapter for the Anthropic Messages API.

    The model list is static; the API key goes in ``x-api-key``.
    """

    def build_call(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        stream: bool,
    ) -> HttpCall:
        params = sampling_params(config)
        thinking_budget = int(params.pop("thinking_budget", DEFAULT_THINKING_BUDGET))
        default_max_tokens = STREAM_MAX_TOKENS if stream else MAX_TOKENS
        max_tokens = int(params.pop("max_tokens", default_max_tokens))

        body: Dict[str, Any] = {
            "model": resolve_model(config, self.definition),
            "max_tokens": max_tokens,
            "system": request.system_prompt,
            "messages": [{"role": "user", "content": build_user_prompt(request)}],
        }

        if stream:
            body["stream"] = True
            if thinking_budget > 0:
                # Extended thinking rejects a custom temperature/top_k
                params.pop("temperature", None)
                params.pop("top_k", None)
                body["thinking"] = {"type": "enabled", "budget_tokens": thinking_budget}
                logger.debug(f"Extended thinking enabled (budget={thinking_budget})")
        body.update(params)

        return HttpCall(
            url=f"{resolve_base_url(config, self.definition)}/v1/messages",
            json=body,
            headers={
                "Content-Type": "application/json",
                "x-api-key": config.api_key or "",
                "anthropic-version": ANTHROPIC_VERSION,
            },
        )

    def create_decoder(self) -> StreamDecoder:
        return MessagesEventDecoder()

    def parse_response(self, data: Dict[str, Any]) -> tuple[str, str]:
        content = []
        reasoning = []
        for block in data["content"]:
            if block.get("type") == "text":
                content.append(block.get("text") or "")
            elif block.get("type") == "thinking":
                reasoning.append(block.get("thinking") or "")
        return "".join(content), "".join(reasoning)
