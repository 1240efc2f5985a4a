"""Tests for GeminiAdapter."""

import json

import httpx
import pytest

from llm_translate.providers.adapters.gemini_adapter import GeminiAdapter
from llm_translate.providers.builtin import BUILTIN_PROVIDERS
from llm_translate.providers.types import ModelInfo, ProviderConfig, TranslationRequest

REQUEST = TranslationRequest(
    source_text="Thank you",
    source_lang="en",
    target_lang="de",
    system_prompt="Translate.",
    user_prompt_template="{text}",
)


def _adapter(handler=None) -> GeminiAdapter:
    transport = httpx.MockTransport(handler) if handler else None
    return GeminiAdapter(BUILTIN_PROVIDERS["gemini"], transport=transport)


def test_build_call_maps_sampling_to_generation_config():
    config = ProviderConfig(
        api_key="g-key",
        model="gemini-2.5-flash",
        sampling_params={"max_tokens": 512, "top_p": 0.8, "top_k": 20, "thinking_budget": 5},
    )

    call = _adapter().build_call(REQUEST, config, stream=True)

    assert call.url.endswith("/v1beta/models/gemini-2.5-flash:streamGenerateContent")
    assert call.params == {"key": "g-key", "alt": "sse"}
    assert call.json["generationConfig"] == {
        "temperature": 0.3,
        "maxOutputTokens": 512,
        "topP": 0.8,
        "topK": 20,
    }
    assert call.json["system_instruction"] == {"parts": [{"text": "Translate."}]}
    assert call.json["contents"] == [{"parts": [{"text": "Thank you"}]}]


@pytest.mark.asyncio
async def test_stream_yields_candidate_text():
    seen = {}
    body = (
        'data: {"candidates": [{"content": {"parts": [{"text": "Vielen "}]}}]}\r\n\r\n'
        'data: {"candidates": [{"content": {"parts": [{"text": "Dank"}]}, "finishReason": "STOP"}]}\r\n\r\n'
    ).encode()

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["alt"] = request.url.params.get("alt")
        return httpx.Response(200, content=body)

    event_types = []
    result = await _adapter(handler).translate_stream(
        REQUEST,
        ProviderConfig(api_key="g-key"),
    )
    async for event in _adapter(handler).stream(REQUEST, ProviderConfig(api_key="g-key")):
        event_types.append(event.type)

    assert result == "Vielen Dank"
    assert event_types == ["content", "content", "done"]
    assert seen["path"] == "/v1beta/models/gemini-2.0-flash-exp:streamGenerateContent"
    assert seen["alt"] == "sse"


@pytest.mark.asyncio
async def test_non_streaming_translate():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith(":generateContent")
        assert json.loads(request.content)["generationConfig"]["temperature"] == 0.3
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "Danke\n"}]}}]})

    assert await _adapter(handler).translate(REQUEST, ProviderConfig(api_key="g")) == "Danke"


@pytest.mark.asyncio
async def test_fetch_models_filters_generate_content_and_sorts_by_label():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params.get("key") == "g"
        return httpx.Response(
            200,
            json={"models": [
                {"name": "models/gemini-2.5-pro", "displayName": "Gemini 2.5 Pro",
                 "supportedGenerationMethods": ["generateContent", "countTokens"]},
                {"name": "models/embedding-001", "displayName": "Embedding 001",
                 "supportedGenerationMethods": ["embedContent"]},
                {"name": "models/gemini-2.0-flash", "displayName": "Gemini 2.0 Flash",
                 "supportedGenerationMethods": ["generateContent"]},
            ]},
        )

    models = await _adapter(handler).fetch_models(ProviderConfig(api_key="g"))

    assert models == [
        ModelInfo(value="gemini-2.0-flash", label="Gemini 2.0 Flash"),
        ModelInfo(value="gemini-2.5-pro", label="Gemini 2.5 Pro"),
    ]
