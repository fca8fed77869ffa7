"""
StudyBuddy Speech API - Main FastAPI Application

Proxy routes for the cloud speech vendors, plus provider discovery for
clients choosing a speech provider.
"""

import sys
from pathlib import Path
from contextlib import asynccontextmanager

# Add parent directory to path to import existing modules
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from backend.speech_providers import SpeechProviderRegistry
from utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events"""
    # Startup
    settings.create_directories()
    app.state.speech_registry = SpeechProviderRegistry()
    logger.info(f"StudyBuddy Speech API on http://{settings.SPEECH_HOST}:{settings.SPEECH_PORT}")
    logger.info(f"API Docs: http://{settings.SPEECH_HOST}:{settings.SPEECH_PORT}/docs")
    yield
    # Shutdown
    logger.info("StudyBuddy Speech API shutting down...")


app = FastAPI(
    title="StudyBuddy Speech API",
    description="Text-to-speech proxy for the study assistant",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False,  # Don't redirect /path to /path/ - causes CORS issues
)

cors_origins = list(settings.CORS_ORIGINS)

# Add custom hostname origin if configured
if settings.SPEECH_HOST not in ["localhost", "127.0.0.1"]:
    cors_origins.append(f"http://{settings.SPEECH_HOST}:{settings.SPEECH_PORT}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Accept",
        "Content-Type",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length"],
)

from web_ui.api.routes import speech

app.include_router(speech.router, prefix="/api/v1/speech", tags=["Speech"])


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "StudyBuddy Speech API",
        "version": "1.0.0",
        "description": "Text-to-speech proxy",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.SPEECH_HOST, port=settings.SPEECH_PORT)
