"""
Built-in Provider Definitions

Pre-configured providers with endpoint defaults and fallback model lists.
"""
from .types import ApiProtocol, ModelInfo, ProviderDefinition


def _models(*entries: tuple[str, str]) -> list[ModelInfo]:
    return [ModelInfo(value=value, label=label) for value, label in entries]


# Built-in provider definitions
BUILTIN_PROVIDERS: dict[str, ProviderDefinition] = {
    "openai": ProviderDefinition(
        id="openai",
        name="OpenAI",
        protocol=ApiProtocol.OPENAI,
        base_url="https://api.openai.com/v1",
        default_model="gpt-4o-mini",
        inline_thinking=True,
        model_include=["gpt"],
        model_exclude=["instruct", "realtime", "audio"],
        model_sort_desc=True,
        default_models=_models(
            ("gpt-4o", "gpt-4o"),
            ("gpt-4o-mini", "gpt-4o-mini"),
            ("gpt-4-turbo", "gpt-4-turbo"),
            ("gpt-4", "gpt-4"),
            ("gpt-3.5-turbo", "gpt-3.5-turbo"),
        ),
    ),

    "claude": ProviderDefinition(
        id="claude",
        name="Claude",
        protocol=ApiProtocol.ANTHROPIC,
        base_url="https://api.anthropic.com",
        default_model="claude-3-5-sonnet-20241022",
        default_models=_models(
            ("claude-opus-4-20250514", "Claude Opus 4"),
            ("claude-sonnet-4-20250514", "Claude Sonnet 4"),
            ("claude-opus-4-1-20250805", "Claude Opus 4.1"),
            ("claude-sonnet-4-5-20250929", "Claude Sonnet 4.5"),
            ("claude-haiku-4-5-20251015", "Claude Haiku 4.5"),
            ("claude-opus-4-5-20251124", "Claude Opus 4.5"),
            ("claude-3-7-sonnet-20250219", "Claude 3.7 Sonnet"),
            ("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet"),
            ("claude-3-5-haiku-20241022", "Claude 3.5 Haiku"),
        ),
    ),

    "gemini": ProviderDefinition(
        id="gemini",
        name="Gemini",
        protocol=ApiProtocol.GEMINI,
        base_url="https://generativelanguage.googleapis.com/v1beta",
        default_model="gemini-2.0-flash-exp",
        default_models=_models(
            ("gemini-3.0-flash", "Gemini 3.0 Flash"),
            ("gemini-3.0-pro", "Gemini 3.0 Pro"),
            ("gemini-2.5-pro", "Gemini 2.5 Pro"),
            ("gemini-2.5-flash", "Gemini 2.5 Flash"),
            ("gemini-2.5-flash-lite-preview-06-17", "Gemini 2.5 Flash Lite"),
            ("gemini-2.0-flash", "Gemini 2.0 Flash"),
            ("gemini-1.5-pro", "Gemini 1.5 Pro"),
            ("gemini-1.5-flash", "Gemini 1.5 Flash"),
        ),
    ),

    "ollama": ProviderDefinition(
        id="ollama",
        name="Ollama",
        protocol=ApiProtocol.OLLAMA,
        base_url="http://localhost:11434",
        default_model="llama3.2",
        requires_api_key=False,
        default_models=_models(
            ("llama3.2", "llama3.2"),
            ("llama3.1", "llama3.1"),
            ("llama3", "llama3"),
            ("mistral", "mistral"),
            ("mixtral", "mixtral"),
            ("qwen2.5", "qwen2.5"),
            ("gemma2", "gemma2"),
            ("phi3", "phi3"),
        ),
    ),

    "llamacpp": ProviderDefinition(
        id="llamacpp",
        name="llama.cpp",
        protocol=ApiProtocol.OPENAI,
        base_url="http://localhost:8080",
        url_suffix="/v1",
        # The server answers with whatever model it has loaded
        default_model="",
        requires_api_key=False,
        inline_thinking=True,
        default_models=_models(("default", "Loaded model")),
    ),

    "openai-compatible": ProviderDefinition(
        id="openai-compatible",
        name="OpenAI Compatible",
        protocol=ApiProtocol.OPENAI,
        default_model="default",
        requires_api_key=False,
        requires_base_url=True,
        inline_thinking=True,
        default_models=_models(("default", "Default model")),
    ),
}


def get_builtin_provider(provider_id: str) -> ProviderDefinition | None:
    """
    Get a built-in provider definition by ID.

    Args:
        provider_id: Provider identifier

    Returns:
        ProviderDefinition if found, None otherwise
    """
    return BUILTIN_PROVIDERS.get(provider_id)


def is_builtin_provider(provider_id: str) -> bool:
    return provider_id in BUILTIN_PROVIDERS
