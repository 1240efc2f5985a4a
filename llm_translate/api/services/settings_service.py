"""
Settings Service

Durable key/value store for user settings: provider credentials, the
selected model and languages, prompts, custom endpoints and UI theme.
Values are addressed by dotted paths (``"openai.api_key"``).
"""
import copy
import json
import logging
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from llm_translate.providers.registry import CUSTOM_PREFIX
from llm_translate.providers.types import ProviderConfig

from ..paths import ensure_local_file, settings_path

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a professional translator. Translate the given text accurately "
    "while preserving the original meaning and tone."
)

DEFAULT_USER_PROMPT = """Translate the following text from {source_lang} to {target_lang}. Only output the translation, nothing else.

Text to translate:
{text}"""

DEFAULT_SETTINGS: Dict[str, Any] = {
    "theme": "light",
    "provider": "openai",
    "model": "gpt-4o-mini",
    "source_lang": "auto",
    "target_lang": "en",
    "streaming": True,
    "openai": {"api_key": "", "base_url": ""},
    "claude": {"api_key": ""},
    "gemini": {"api_key": ""},
    "ollama": {"base_url": "http://localhost:11434"},
    "llamacpp": {"base_url": "http://localhost:8080"},
    "openai_compatible": {"api_key": "", "base_url": ""},
    "custom_endpoints": [],
    "selected_custom_endpoint": None,
    "sampling": {},
    "advanced_settings": False,
    "history": {"auto_save": False},
    "prompts": {
        "system": DEFAULT_SYSTEM_PROMPT,
        "user": DEFAULT_USER_PROMPT,
    },
}


class CustomEndpoint(BaseModel):
    """User-defined OpenAI-compatible endpoint, addressed as ``custom-<id>``."""
    id: str
    name: str = "Custom API"
    base_url: str = ""
    api_key: str = ""
    model: str = ""
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def merge_deep(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``source`` over ``target`` without mutating either."""
    result = copy.deepcopy(target)
    for key, value in source.items():
        if isinstance(value, dict):
            base = result.get(key)
            result[key] = merge_deep(base if isinstance(base, dict) else {}, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class SettingsService:
    """Service for reading and persisting user settings"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else settings_path()
        self._ensure_config_exists()
        self.settings = self._load_config()

    def _ensure_config_exists(self) -> None:
        """Create default settings file if it doesn't exist"""
        if not self.config_path.exists():
            initial_text = yaml.safe_dump(DEFAULT_SETTINGS, allow_unicode=True, sort_keys=False)
            ensure_local_file(local_path=self.config_path, initial_text=initial_text)
            logger.info(f"Created default settings at {self.config_path}")

    def _load_config(self) -> Dict[str, Any]:
        """Load settings from YAML, filling missing keys from the defaults"""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("settings file must contain a mapping")
            return merge_deep(DEFAULT_SETTINGS, data)
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.error(f"Failed to load settings: {e}")
            return copy.deepcopy(DEFAULT_SETTINGS)

    def reload(self) -> None:
        self.settings = self._load_config()

    def persist(self) -> None:
        """Write current settings to disk"""
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(self.settings, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to save settings: {e}")
            raise

    def get(self, path: str, default: Any = None) -> Any:
        """Read a value by dotted path; missing paths return ``default``."""
        value: Any = self.settings
        for key in path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, path: str, value: Any) -> None:
        """Set a value by dotted path, creating intermediate mappings. Not persisted."""
        keys = path.split(".")
        node = self.settings
        for key in keys[:-1]:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[keys[-1]] = value

    def update(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Apply dotted-path updates and persist them."""
        for path, value in updates.items():
            self.set(path, value)
        self.persist()
        logger.info(f"Settings updated: {', '.join(sorted(updates))}")
        return self.settings

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.settings)

    # ==================== Import / Export ====================

    def export_json(self) -> str:
        return json.dumps(self.settings, ensure_ascii=False, indent=2)

    def export_filename(self) -> str:
        return f"llm_translate_settings_{datetime.now().strftime('%Y-%m-%d')}.json"

    def import_json(self, text: str) -> None:
        """
        Replace settings with an exported JSON document.

        Raises:
            ValueError: Not a JSON object
        """
        try:
            imported = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError("Invalid settings file") from e
        if not isinstance(imported, dict):
            raise ValueError("Invalid settings file")

        self.settings = merge_deep(DEFAULT_SETTINGS, imported)
        self.persist()
        logger.info("Settings imported")

    def reset_prompts(self) -> None:
        self.settings["prompts"] = copy.deepcopy(DEFAULT_SETTINGS["prompts"])
        self.persist()

    def toggle_theme(self) -> str:
        theme = "dark" if self.get("theme") == "light" else "light"
        self.settings["theme"] = theme
        self.persist()
        return theme

    # ==================== Custom Endpoints ====================

    def get_custom_endpoints(self) -> List[CustomEndpoint]:
        return [CustomEndpoint(**entry) for entry in self.settings.get("custom_endpoints") or []]

    def get_custom_endpoint(self, endpoint_id: str) -> Optional[CustomEndpoint]:
        for endpoint in self.get_custom_endpoints():
            if endpoint.id == endpoint_id:
                return endpoint
        return None

    def add_custom_endpoint(
        self,
        name: str = "Custom API",
        base_url: str = "",
        api_key: str = "",
        model: str = "",
    ) -> CustomEndpoint:
        endpoint = CustomEndpoint(
            id=secrets.token_hex(6),
            name=name or "Custom API",
            base_url=base_url,
            api_key=api_key,
            model=model,
        )
        self.settings.setdefault("custom_endpoints", []).append(endpoint.model_dump())
        self.persist()
        logger.info(f"Added custom endpoint {endpoint.id} ({endpoint.name})")
        return endpoint

    def update_custom_endpoint(self, endpoint_id: str, updates: Dict[str, Any]) -> bool:
        endpoints = self.settings.get("custom_endpoints") or []
        for index, entry in enumerate(endpoints):
            if entry.get("id") == endpoint_id:
                merged = {**entry, **updates, "id": endpoint_id}
                endpoints[index] = CustomEndpoint(**merged).model_dump()
                self.persist()
                return True
        return False

    def delete_custom_endpoint(self, endpoint_id: str) -> bool:
        endpoints = self.settings.get("custom_endpoints") or []
        remaining = [entry for entry in endpoints if entry.get("id") != endpoint_id]
        if len(remaining) == len(endpoints):
            return False

        self.settings["custom_endpoints"] = remaining
        if self.settings.get("selected_custom_endpoint") == endpoint_id:
            self.settings["selected_custom_endpoint"] = None
        self.persist()
        return True

    def select_custom_endpoint(self, endpoint_id: Optional[str]) -> None:
        self.settings["selected_custom_endpoint"] = endpoint_id
        self.persist()

    def get_selected_custom_endpoint(self) -> Optional[CustomEndpoint]:
        """Selected endpoint, else the first one defined."""
        selected = self.settings.get("selected_custom_endpoint")
        if selected:
            return self.get_custom_endpoint(selected)
        endpoints = self.get_custom_endpoints()
        return endpoints[0] if endpoints else None

    # ==================== Provider Config ====================

    def get_provider_config(self, provider_id: str) -> ProviderConfig:
        """Build the per-request ProviderConfig for a provider id."""
        model = self.get("model") or ""
        sampling = self.get("sampling") or {}

        if provider_id.startswith(CUSTOM_PREFIX):
            endpoint = self.get_custom_endpoint(provider_id[len(CUSTOM_PREFIX):])
            if endpoint is None:
                return ProviderConfig(sampling_params=sampling)
            return ProviderConfig(
                api_key=endpoint.api_key or None,
                base_url=endpoint.base_url or None,
                model=endpoint.model or model,
                sampling_params=sampling,
            )

        section = self.get(provider_id.replace("-", "_"))
        if not isinstance(section, dict):
            section = {}
        provider_sampling = section.get("sampling")
        if self.get("advanced_settings") and isinstance(provider_sampling, dict):
            # Per-provider values override the shared map
            sampling = {**sampling, **provider_sampling}
        if provider_id == "llamacpp":
            # llama.cpp serves whichever model it has loaded
            model = ""
        return ProviderConfig(
            api_key=section.get("api_key") or None,
            base_url=section.get("base_url") or None,
            model=model,
            sampling_params=sampling,
        )
