"""Shared pytest fixtures for all tests."""

import json
import shutil
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from llm_translate.api.services.history_service import HistoryService
from llm_translate.api.services.notifications import CollectingNotifier
from llm_translate.api.services.settings_service import SettingsService


def _create_workspace_temp_dir(kind: str) -> Path:
    """Create a temporary directory under repository-local .pytest_work."""
    repo_root = Path(__file__).resolve().parents[1]
    root_dir = repo_root / ".pytest_work" / kind
    root_dir.mkdir(parents=True, exist_ok=True)
    temp_dir = root_dir / f"{kind}_{uuid.uuid4().hex[:8]}"
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


@pytest.fixture
def tmp_path():
    """Workspace-local replacement for pytest's tmp_path fixture."""
    temp_dir = _create_workspace_temp_dir("tmp_path")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def settings_service(tmp_path) -> SettingsService:
    return SettingsService(str(tmp_path / "settings.yaml"))


@pytest.fixture
def history_service(tmp_path) -> HistoryService:
    return HistoryService(str(tmp_path / "history.yaml"))


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def sse_body() -> Callable[..., bytes]:
    """Encode payloads as a chat-completions event stream ending in [DONE]."""
    def _build(*payloads: Dict[str, Any], done: bool = True) -> bytes:
        body = "".join(f"data: {json.dumps(p)}\n\n" for p in payloads)
        if done:
            body += "data: [DONE]\n\n"
        return body.encode("utf-8")

    return _build


@pytest.fixture
def chunked() -> Callable[[bytes, int], Any]:
    """Async byte iterator that splits ``data`` into ``size``-byte pieces."""
    def _build(data: bytes, size: int):
        async def _iter():
            for i in range(0, len(data), size):
                yield data[i:i + size]

        return _iter()

    return _build


def content_deltas(texts: List[str]) -> List[Dict[str, Any]]:
    return [{"choices": [{"delta": {"content": text}}]} for text in texts]


@pytest.fixture
def chat_deltas() -> Callable[[List[str]], List[Dict[str, Any]]]:
    return content_deltas
