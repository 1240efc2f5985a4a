"""FastAPI application entry point."""

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before importing runtime config/services.
load_dotenv()

from .config import settings
from .logging_config import setup_logging

setup_logging(settings.log_dir, settings.log_level)

import logging

from .routers import history, models, settings as settings_router, text_tools, translation

logger = logging.getLogger(__name__)

app = FastAPI(
    title="LLM Translate API",
    description="Streaming translation through OpenAI, Claude, Gemini, Ollama and llama.cpp",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# Register routers
app.include_router(translation.router)
app.include_router(models.router)
app.include_router(history.router)
app.include_router(settings_router.router)
app.include_router(text_tools.router)

logger.info("=" * 80)
logger.info("FastAPI Application Started")
logger.info("CORS Origins: %s", settings.cors_origins)
logger.info("=" * 80)


@app.on_event("startup")
async def startup_event():
    """Create settings and history files if missing."""
    from .services.translation_service import get_translation_service

    service = get_translation_service()
    logger.info("Settings file: %s", service.settings.config_path)
    logger.info("History file: %s", service.history.history_path)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "LLM Translate API",
        "docs": "/docs",
        "health": "/api/health",
    }
