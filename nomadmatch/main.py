"""
NomadMatch API - Main Application Entry Point

This module initializes the FastAPI application with:
- Logging configuration
- Database schema initialization
- CORS middleware for the mobile/web client
- Prometheus metrics
- API router registration and error mapping

Architecture:
    FastAPI App
    ├── Lifespan Management (startup)
    ├── CORS Middleware
    ├── Prometheus Middleware (/metrics)
    └── API Router
        ├── /auth - Session login/logout
        ├── /profile - Profile read/write
        └── /dating - Dating toggle, question wizard, matches
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from nomadmatch.api import api_router
from nomadmatch.config import get_settings
from nomadmatch.database import init_db
from nomadmatch.middleware import setup_metrics
from nomadmatch.services.matchmaking import WizardIncompleteError
from nomadmatch.services.profile_store import ProfileNotFoundError, ProfileStoreError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.

    Startup:
        1. Initialize database tables
        2. Warn when ranking has no credentials

    Yields:
        Control to the application during its runtime
    """
    await init_db()
    if settings.ranking_provider == "openai" and not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; match ranking will return no results")
    yield


app = FastAPI(
    title="NomadMatch API",
    description="Dating profile wizard and AI-assisted matching",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_metrics(app)
app.include_router(api_router)


@app.exception_handler(ProfileNotFoundError)
async def profile_not_found_handler(request: Request, exc: ProfileNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ProfileStoreError)
async def profile_store_error_handler(request: Request, exc: ProfileStoreError):
    logger.error(f"Profile store failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Profile storage unavailable, please retry"},
    )


@app.exception_handler(WizardIncompleteError)
async def wizard_incomplete_handler(request: Request, exc: WizardIncompleteError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": str(exc),
            "remaining": [q.field for q in exc.remaining],
        },
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
