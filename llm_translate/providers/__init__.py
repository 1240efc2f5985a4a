"""
LLM Provider Abstraction Layer

This package provides a uniform streaming interface over several provider
wire protocols.

Key components:
- types: Data models and stream events
- decoders: Incremental wire decoders (event-stream, typed events, NDJSON)
- thinking: Inline <think> markup extraction
- builtin: Pre-configured provider definitions
- registry: Adapter lookup by provider id
- adapters: Protocol-specific implementations

Usage:
    from llm_translate.providers import get_adapter, ProviderConfig, TranslationRequest

    adapter = get_adapter("openai")
    config = ProviderConfig(api_key="your-key", model="gpt-4o-mini")
    request = TranslationRequest(source_text="Hallo", target_lang="en")

    async for event in adapter.stream(request, config):
        if event.type == "reasoning":
            print(f"<think>{event.text}</think>")
        elif event.type == "content":
            print(event.text, end="")
"""
from .types import (
    ApiProtocol,
    ModelInfo,
    ProviderDefinition,
    ProviderConfig,
    TranslationRequest,
    ContentDelta,
    ReasoningDelta,
    Done,
    ErrorEvent,
    StreamEvent,
)
from .errors import (
    TranslationError,
    ConfigurationError,
    TransportError,
    DecodeError,
    CancelledError,
    UnsupportedProviderError,
)
from .cancellation import CancellationToken
from .thinking import ThinkingExtractor, extract_thinking
from .builtin import BUILTIN_PROVIDERS, get_builtin_provider, is_builtin_provider
from .base import BaseLLMAdapter, StreamCallbacks
from .registry import AdapterRegistry, get_adapter, get_registry

__all__ = [
    # Types
    "ApiProtocol",
    "ModelInfo",
    "ProviderDefinition",
    "ProviderConfig",
    "TranslationRequest",
    "ContentDelta",
    "ReasoningDelta",
    "Done",
    "ErrorEvent",
    "StreamEvent",
    # Errors
    "TranslationError",
    "ConfigurationError",
    "TransportError",
    "DecodeError",
    "CancelledError",
    "UnsupportedProviderError",
    # Streaming
    "CancellationToken",
    "ThinkingExtractor",
    "extract_thinking",
    "StreamCallbacks",
    # Builtin
    "BUILTIN_PROVIDERS",
    "get_builtin_provider",
    "is_builtin_provider",
    # Registry
    "AdapterRegistry",
    "get_adapter",
    "get_registry",
    # Base
    "BaseLLMAdapter",
]
