"""
Adapter Registry

Maps provider ids to adapters through the provider's wire protocol.
"""
import logging
from typing import Dict, List, Optional, Type

import httpx

from .adapters import AnthropicAdapter, GeminiAdapter, OllamaAdapter, OpenAIAdapter
from .base import BaseLLMAdapter
from .builtin import BUILTIN_PROVIDERS
from .errors import UnsupportedProviderError
from .types import ApiProtocol, ModelInfo, ProviderConfig, ProviderDefinition

logger = logging.getLogger(__name__)

CUSTOM_PREFIX = "custom-"
COMPATIBLE_PROVIDER_ID = "openai-compatible"


class AdapterRegistry:
    """
    Provider adapter registry.

    Populated with the built-in providers; further definitions may be
    registered at startup. ``custom-<id>`` ids resolve to the
    OpenAI-compatible definition.
    """

    # Mapping of API protocols to adapter classes
    _protocol_adapters: Dict[ApiProtocol, Type[BaseLLMAdapter]] = {
        ApiProtocol.OPENAI: OpenAIAdapter,
        ApiProtocol.ANTHROPIC: AnthropicAdapter,
        ApiProtocol.GEMINI: GeminiAdapter,
        ApiProtocol.OLLAMA: OllamaAdapter,
    }

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._definitions: Dict[str, ProviderDefinition] = dict(BUILTIN_PROVIDERS)

    def register(self, definition: ProviderDefinition) -> None:
        """Add or replace a provider definition."""
        if definition.id in self._definitions:
            logger.info(f"Replacing provider definition: {definition.id}")
        self._definitions[definition.id] = definition

    def available_providers(self) -> List[str]:
        return list(self._definitions)

    def definition(self, provider_id: str) -> ProviderDefinition:
        """
        Resolve a provider id to its definition.

        Raises:
            UnsupportedProviderError: Unknown provider id
        """
        if provider_id.startswith(CUSTOM_PREFIX) and provider_id not in self._definitions:
            provider_id = COMPATIBLE_PROVIDER_ID
        definition = self._definitions.get(provider_id)
        if definition is None:
            raise UnsupportedProviderError(f"Unknown provider: {provider_id}")
        return definition

    def get(self, provider_id: str) -> BaseLLMAdapter:
        """
        Get an adapter instance for a provider id.

        Raises:
            UnsupportedProviderError: Unknown provider id
        """
        definition = self.definition(provider_id)
        adapter_class = self._protocol_adapters[definition.protocol]
        logger.debug(f"Using {adapter_class.__name__} for {provider_id}")
        return adapter_class(definition, transport=self._transport)

    async def fetch_models(self, provider_id: str, config: ProviderConfig) -> List[ModelInfo]:
        """Best-effort model listing; unknown ids raise UnsupportedProviderError."""
        return await self.get(provider_id).fetch_models(config)

    def default_models(self, provider_id: str) -> List[ModelInfo]:
        return self.get(provider_id).default_models()


_default_registry: Optional[AdapterRegistry] = None


def get_registry() -> AdapterRegistry:
    """Process-wide registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = AdapterRegistry()
    return _default_registry


def get_adapter(provider_id: str) -> BaseLLMAdapter:
    """
    Get the adapter for a provider id from the process-wide registry.

    Args:
        provider_id: Provider identifier (e.g. "openai", "custom-abc")

    Returns:
        Adapter instance
    """
    return get_registry().get(provider_id)
