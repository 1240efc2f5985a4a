"""End-to-end tests for the HTTP service surface."""

import json

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from llm_translate.api.routers import history, models, settings as settings_router, text_tools, translation
from llm_translate.api.services.translation_service import TranslationService, get_translation_service
from llm_translate.providers.registry import AdapterRegistry


def _events(body: str):
    return [json.loads(line[len("data: "):]) for line in body.splitlines() if line.startswith("data: ")]


@pytest.fixture
def provider_handler():
    state = {"status": 200, "texts": ["Hola", " mundo"]}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/models"):
            return httpx.Response(200, json={"data": [{"id": "gpt-4o"}, {"id": "gpt-4o-audio"}]})
        if state["status"] != 200:
            return httpx.Response(state["status"], json={"error": {"message": "Rate limit reached"}})
        body = "".join(
            f'data: {json.dumps({"choices": [{"delta": {"content": text}}]})}\n\n' for text in state["texts"]
        )
        return httpx.Response(200, content=(body + "data: [DONE]\n\n").encode())

    handler.state = state
    return handler


@pytest.fixture
def client(settings_service, history_service, notifier, provider_handler):
    settings_service.update({"openai.api_key": "sk-test"})
    service = TranslationService(
        settings=settings_service,
        history=history_service,
        notifier=notifier,
        registry=AdapterRegistry(transport=httpx.MockTransport(provider_handler)),
    )

    app = FastAPI()
    for module in (translation, models, history, settings_router, text_tools):
        app.include_router(module.router)
    app.dependency_overrides[get_translation_service] = lambda: service

    with TestClient(app) as test_client:
        test_client.service = service
        yield test_client


def test_translate_streams_content_then_done(client):
    response = client.post("/api/translate", json={"text": "Hello world", "target_lang": "es"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    events = _events(response.text)
    content = [e["text"] for e in events if e["type"] == "content"]
    assert content[:2] == ["Hola", "Hola mundo"]
    assert events[-1] == {
        "type": "done",
        "text": "Hola mundo",
        "reasoning": "",
        "provider": "openai",
        "model": "gpt-4o-mini",
    }
    assert client.service.settings.get("target_lang") == "es"


def test_translate_reports_provider_error(client, provider_handler):
    provider_handler.state["status"] = 429

    events = _events(client.post("/api/translate", json={"text": "Hello"}).text)

    assert events == [{"type": "error", "message": "Rate limit reached"}]


def test_translate_rejects_empty_text(client):
    assert client.post("/api/translate", json={"text": "  "}).status_code == 400


def test_cancel_and_state_when_idle(client):
    assert client.post("/api/translate/cancel").json() == {"cancelled": False}
    assert client.get("/api/translate/state").json() == {"state": "idle", "active": False}


def test_history_save_search_delete(client):
    assert client.post("/api/history").status_code == 404

    client.post("/api/translate", json={"text": "Hello world"})
    record_id = client.post("/api/history").json()["id"]

    found = client.get("/api/history", params={"q": "MUNDO"}).json()
    assert [r["id"] for r in found] == [record_id]
    assert client.get(f"/api/history/{record_id}").json()["target_text"] == "Hola mundo"

    assert client.delete(f"/api/history/{record_id}").status_code == 200
    assert client.delete(f"/api/history/{record_id}").status_code == 404
    assert client.delete("/api/history").json() == {"message": "History cleared"}


def test_models_listing_and_providers(client):
    listed = client.get("/api/models/openai").json()
    assert [m["value"] for m in listed] == ["gpt-4o"]

    assert client.get("/api/models/mistral").status_code == 404

    endpoint = client.post(
        "/api/settings/custom-endpoints", json={"name": "Box", "base_url": "http://box/v1"}
    ).json()
    providers = client.get("/api/providers").json()
    assert providers[:2] == ["openai", "claude"]
    assert f"custom-{endpoint['id']}" in providers


def test_settings_endpoints(client):
    patched = client.patch("/api/settings", json={"updates": {"claude.api_key": "sk-ant"}}).json()
    assert patched["claude"]["api_key"] == "sk-ant"
    assert client.get("/api/settings").json()["claude"]["api_key"] == "sk-ant"
    assert client.patch("/api/settings", json={"updates": {}}).status_code == 400

    exported = client.get("/api/settings/export")
    assert "attachment" in exported.headers["content-disposition"]
    assert exported.json()["claude"]["api_key"] == "sk-ant"

    assert client.post("/api/settings/toggle-theme").json() == {"theme": "dark"}

    swap = client.post("/api/settings/swap-languages").json()
    assert swap["swapped"] is False


def test_custom_endpoint_routes(client):
    created = client.post("/api/settings/custom-endpoints", json={"base_url": "http://a/v1"}).json()
    endpoint_id = created["id"]

    updated = client.patch(f"/api/settings/custom-endpoints/{endpoint_id}", json={"model": "qwen"}).json()
    assert updated["model"] == "qwen"
    assert updated["base_url"] == "http://a/v1"

    assert client.post(f"/api/settings/custom-endpoints/{endpoint_id}/select").json() == {"selected": endpoint_id}
    assert client.post("/api/settings/custom-endpoints/missing/select").status_code == 404

    assert client.delete(f"/api/settings/custom-endpoints/{endpoint_id}").status_code == 200
    assert client.get("/api/settings/custom-endpoints").json() == []


def test_translate_rejects_unknown_provider_without_saving_it(client):
    response = client.post("/api/translate", json={"text": "Hello", "provider": "bogus"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown provider: bogus"
    assert client.service.settings.get("provider") == "openai"

    events = _events(client.post("/api/translate", json={"text": "Hello"}).text)
    assert events[-1]["type"] == "done"


def test_translate_rejects_missing_custom_endpoint(client):
    response = client.post("/api/translate", json={"text": "Hello", "provider": "custom-nope"})

    assert response.status_code == 400
    assert client.service.settings.get("provider") == "openai"


def test_replace_placeholders_endpoint(client):
    response = client.post(
        "/api/text/replace-placeholders",
        json={"text": "{{User}} meets {{char}} and {{CHAR}}", "user": "Mina", "char": ""},
    )

    assert response.status_code == 200
    assert response.json() == {"text": "Mina meets {{char}} and {{CHAR}}"}
