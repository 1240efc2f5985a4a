"""
Path helpers for repository layout.

Layout:
- config/local/: instance-specific writable configs (gitignored)
- data/state/: instance/user state files (gitignored)
- logs/: rotating log files
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional


@lru_cache(maxsize=1)
def repo_root() -> Path:
    # This file lives at llm_translate/api/paths.py -> parents: api/ -> llm_translate/ -> repo root
    return Path(__file__).resolve().parents[2]


def config_local_dir() -> Path:
    return repo_root() / "config" / "local"


def data_state_dir() -> Path:
    return repo_root() / "data" / "state"


def logs_dir() -> Path:
    return repo_root() / "logs"


def settings_path() -> Path:
    return config_local_dir() / "settings.yaml"


def history_path() -> Path:
    return data_state_dir() / "translation_history.yaml"


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def ensure_local_file(*, local_path: Path, initial_text: Optional[str] = None) -> None:
    """Ensure a writable local file exists, seeding it with ``initial_text``."""
    if local_path.exists():
        return

    ensure_dir(local_path.parent)
    local_path.write_text(initial_text or "", encoding="utf-8")
