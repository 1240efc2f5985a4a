"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path
from typing import List, Optional
import os


def _default_cors_origins() -> List[str]:
    frontend_port = os.getenv("FRONTEND_PORT", "").strip()
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    if frontend_port:
        origins = [
            f"http://localhost:{frontend_port}",
            f"http://127.0.0.1:{frontend_port}",
            *origins,
        ]
    return origins


class Settings(BaseSettings):
    """Process settings loaded from environment variables."""

    # API Configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Storage Configuration (None -> repository layout from paths.py)
    settings_file: Optional[Path] = None
    history_file: Optional[Path] = None
    max_history_items: int = Field(default=100, ge=1)

    # CORS Configuration
    cors_origins: List[str] = Field(default_factory=_default_cors_origins)

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
