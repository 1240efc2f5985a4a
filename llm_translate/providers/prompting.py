"""
Prompt helpers shared by all adapters.

Placeholder substitution, language display names and sampling defaults.
"""
import re
from typing import Any, Dict, List

from .types import ProviderConfig, ProviderDefinition, TranslationRequest

DEFAULT_TEMPERATURE = 0.3

LANGUAGE_NAMES: Dict[str, str] = {
    "auto": "auto-detected language",
    "ko": "Korean",
    "en": "English",
    "ja": "Japanese",
    "zh": "Chinese",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "ru": "Russian",
    "pt": "Portuguese",
    "it": "Italian",
    "vi": "Vietnamese",
    "th": "Thai",
    "id": "Indonesian",
    "ar": "Arabic",
}

_PLACEHOLDER_RE = re.compile(r"\{(source_lang|target_lang|text)\}")


def language_name(code: str) -> str:
    """Map a language code to its English name; unknown codes pass through."""
    return LANGUAGE_NAMES.get(code, code)


def build_user_prompt(request: TranslationRequest) -> str:
    """
    Substitute {source_lang}, {target_lang} and {text} in the user template.

    Single pass: substituted values are never scanned for placeholders again.
    """
    values = {
        "source_lang": language_name(request.source_lang),
        "target_lang": language_name(request.target_lang),
        "text": request.source_text,
    }
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], request.user_prompt_template)


def build_chat_messages(request: TranslationRequest) -> List[Dict[str, str]]:
    """System + user message pair used by chat-style protocols."""
    return [
        {"role": "system", "content": request.system_prompt},
        {"role": "user", "content": build_user_prompt(request)},
    ]


def resolve_model(config: ProviderConfig, definition: ProviderDefinition) -> str:
    return config.model or definition.default_model


def resolve_base_url(config: ProviderConfig, definition: ProviderDefinition) -> str:
    base_url = config.base_url or definition.base_url
    return base_url.rstrip("/")


def sampling_params(config: ProviderConfig) -> Dict[str, Any]:
    """Sampling parameters with the translation default temperature applied."""
    params: Dict[str, Any] = {"temperature": DEFAULT_TEMPERATURE}
    params.update(config.sampling_params)
    return params
