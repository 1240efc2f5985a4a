"""Unit tests for SettingsService."""

import json

import pytest
import yaml

from llm_translate.api.services.settings_service import (
    DEFAULT_SYSTEM_PROMPT,
    SettingsService,
    merge_deep,
)


def test_creates_default_file(tmp_path):
    path = tmp_path / "nested" / "settings.yaml"

    service = SettingsService(str(path))

    assert path.exists()
    assert service.get("provider") == "openai"
    assert service.get("ollama.base_url") == "http://localhost:11434"
    assert service.get("prompts.system") == DEFAULT_SYSTEM_PROMPT


def test_missing_keys_are_filled_from_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump({"provider": "claude", "claude": {"api_key": "sk-ant"}}), encoding="utf-8")

    service = SettingsService(str(path))

    assert service.get("provider") == "claude"
    assert service.get("claude.api_key") == "sk-ant"
    assert service.get("target_lang") == "en"
    assert service.get("history.auto_save") is False


def test_get_set_dotted_paths(settings_service):
    assert settings_service.get("does.not.exist", "fallback") == "fallback"

    settings_service.set("openai.api_key", "sk-1")
    settings_service.set("new.section.value", 3)

    assert settings_service.get("openai.api_key") == "sk-1"
    assert settings_service.get("new.section") == {"value": 3}


def test_persist_round_trips_through_yaml(settings_service):
    settings_service.set("model", "gpt-4o")
    settings_service.persist()

    reloaded = SettingsService(str(settings_service.config_path))

    assert reloaded.get("model") == "gpt-4o"


def test_update_persists_dotted_updates(settings_service):
    settings_service.update({"target_lang": "ko", "gemini.api_key": "g"})

    reloaded = SettingsService(str(settings_service.config_path))

    assert reloaded.get("target_lang") == "ko"
    assert reloaded.get("gemini.api_key") == "g"


def test_export_import_json(settings_service):
    settings_service.set("theme", "dark")
    exported = settings_service.export_json()

    settings_service.import_json(json.dumps({"provider": "ollama", "prompts": {"user": "{text}"}}))

    assert settings_service.get("provider") == "ollama"
    assert settings_service.get("prompts.user") == "{text}"
    assert settings_service.get("prompts.system") == DEFAULT_SYSTEM_PROMPT
    assert settings_service.get("theme") == "light"
    assert json.loads(exported)["theme"] == "dark"
    assert settings_service.export_filename().startswith("llm_translate_settings_")


@pytest.mark.parametrize("text", ["not json", "[1, 2]"])
def test_import_rejects_invalid_documents(settings_service, text):
    with pytest.raises(ValueError, match="Invalid settings file"):
        settings_service.import_json(text)


def test_reset_prompts_and_toggle_theme(settings_service):
    settings_service.set("prompts.system", "custom")

    settings_service.reset_prompts()

    assert settings_service.get("prompts.system") == DEFAULT_SYSTEM_PROMPT
    assert settings_service.toggle_theme() == "dark"
    assert settings_service.toggle_theme() == "light"


def test_custom_endpoint_crud(settings_service):
    first = settings_service.add_custom_endpoint(name="LM Studio", base_url="http://localhost:1234/v1")
    second = settings_service.add_custom_endpoint(name="", base_url="http://gpu-box:8000/v1", model="qwen")

    assert second.name == "Custom API"
    assert settings_service.get_selected_custom_endpoint().id == first.id

    settings_service.select_custom_endpoint(second.id)
    assert settings_service.get_selected_custom_endpoint().id == second.id

    assert settings_service.update_custom_endpoint(second.id, {"api_key": "k"}) is True
    assert settings_service.get_custom_endpoint(second.id).api_key == "k"
    assert settings_service.update_custom_endpoint("missing", {"api_key": "k"}) is False

    assert settings_service.delete_custom_endpoint(second.id) is True
    assert settings_service.get("selected_custom_endpoint") is None
    assert settings_service.delete_custom_endpoint(second.id) is False
    assert [e.id for e in settings_service.get_custom_endpoints()] == [first.id]


def test_provider_config_for_builtin_and_custom(settings_service):
    settings_service.update({
        "openai.api_key": "sk-1",
        "model": "gpt-4o",
        "sampling": {"temperature": 0.7},
    })
    endpoint = settings_service.add_custom_endpoint(base_url="http://host/v1", model="qwen")

    openai_config = settings_service.get_provider_config("openai")
    assert openai_config.api_key == "sk-1"
    assert openai_config.base_url is None
    assert openai_config.model == "gpt-4o"
    assert openai_config.sampling_params == {"temperature": 0.7}

    assert settings_service.get_provider_config("llamacpp").base_url == "http://localhost:8080"
    assert settings_service.get_provider_config("llamacpp").model == ""

    custom_config = settings_service.get_provider_config(f"custom-{endpoint.id}")
    assert custom_config.base_url == "http://host/v1"
    assert custom_config.model == "qwen"
    assert custom_config.api_key is None

    assert settings_service.get_provider_config("custom-unknown").base_url is None


def test_merge_deep_does_not_mutate_inputs():
    target = {"a": {"b": 1, "c": 2}, "list": [1]}
    source = {"a": {"b": 5}, "list": [2, 3]}

    merged = merge_deep(target, source)

    assert merged == {"a": {"b": 5, "c": 2}, "list": [2, 3]}
    assert target == {"a": {"b": 1, "c": 2}, "list": [1]}


def test_provider_sampling_applies_only_with_advanced_settings(settings_service):
    settings_service.update({
        "sampling": {"temperature": 0.5, "top_p": 0.9},
        "ollama.sampling": {"top_p": 0.8, "repeat_penalty": 1.1},
    })

    assert settings_service.get_provider_config("ollama").sampling_params == {"temperature": 0.5, "top_p": 0.9}

    settings_service.update({"advanced_settings": True})

    assert settings_service.get_provider_config("ollama").sampling_params == {
        "temperature": 0.5,
        "top_p": 0.8,
        "repeat_penalty": 1.1,
    }
    assert settings_service.get_provider_config("openai").sampling_params == {"temperature": 0.5, "top_p": 0.9}
