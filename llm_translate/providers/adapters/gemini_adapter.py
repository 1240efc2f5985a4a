"""
Gemini Adapter

Adapter for Google Gemini models over the generateContent REST API.
"""
import logging
from typing import Any, Dict, List

from ..base import BaseLLMAdapter, HttpCall
from ..decoders import GenerateContentDecoder, StreamDecoder
from ..prompting import build_user_prompt, resolve_base_url, resolve_model, sampling_params
from ..types import ModelInfo, ProviderConfig, TranslationRequest

logger = logging.getLogger(__name__)

# Sampling parameter name -> generationConfig field
_GENERATION_CONFIG_KEYS = {
    "temperature": "temperature",
    "max_tokens": "maxOutputTokens",
    "top_p": "topP",
    "top_k": "topK",
}


class GeminiAdapter(BaseLLMAdapter):
    """
    Adapter for Gemini generateContent.

    Streaming uses ``:streamGenerateContent`` with ``alt=sse`` so the response
    is framed as server-sent events.
    """

    def build_call(
        self,
        request: TranslationRequest,
        config: ProviderConfig,
        stream: bool,
    ) -> HttpCall:
        generation_config = {
            _GENERATION_CONFIG_KEYS[key]: value
            for key, value in sampling_params(config).items()
            if key in _GENERATION_CONFIG_KEYS
        }
        body = {
            "system_instruction": {"parts": [{"text": request.system_prompt}]},
            "contents": [{"parts": [{"text": build_user_prompt(request)}]}],
            "generationConfig": generation_config,
        }

        model = resolve_model(config, self.definition)
        method = "streamGenerateContent" if stream else "generateContent"
        params = {"key": config.api_key or ""}
        if stream:
            params["alt"] = "sse"

        return HttpCall(
            url=f"{resolve_base_url(config, self.definition)}/models/{model}:{method}",
            json=body,
            headers={"Content-Type": "application/json"},
            params=params,
        )

    def create_decoder(self) -> StreamDecoder:
        return GenerateContentDecoder()

    def parse_response(self, data: Dict[str, Any]) -> tuple[str, str]:
        return data["candidates"][0]["content"]["parts"][0]["text"], ""

    async def _fetch_model_list(self, config: ProviderConfig) -> List[ModelInfo]:
        if not config.api_key:
            return []

        data = await self._get_json(
            f"{resolve_base_url(config, self.definition)}/models",
            params={"key": config.api_key},
        )
        models = []
        for entry in data.get("models", []):
            if "generateContent" not in (entry.get("supportedGenerationMethods") or []):
                continue
            name = entry.get("name", "").removeprefix("models/")
            if name:
                models.append(ModelInfo(value=name, label=entry.get("displayName") or name))
        models.sort(key=lambda m: m.label)
        logger.info(f"{self.name} listed {len(models)} models")
        return models
