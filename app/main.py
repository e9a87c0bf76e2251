# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the EnzoLearn API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 5000
# =============================================================================

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    EnzoLearnException,
    database_exception_handler,
    enzolearn_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.rate_limit import rate_limit
from app.routers import activity, ai, collections, flashcards, health, study_items
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown.
    """
    logger.info(f"Starting EnzoLearn API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.ELEVENLABS_API_KEY:
        logger.warning("ELEVENLABS_API_KEY is not set; text-to-speech requests will fail")

    yield

    logger.info("Shutting down EnzoLearn API")


# Create FastAPI application
app = FastAPI(
    title="EnzoLearn API",
    description="""
## Study Companion API

EnzoLearn organizes study material into collections and helps you learn it.

### Features

- **Collections** - Folders for notes, flashcards and quizzes
- **Flashcard Sets** - Question/answer decks with study session tracking
- **AI Tools** - Generate flashcards, summarize material, ask a tutor
- **Text-to-Speech** - Listen to notes and answers as mp3 audio
- **Activity Feed** - A log of everything you create and study

Every response uses the envelope `{"success": bool, "data": ..., "error": "..."}`.
Authenticate with `Authorization: Bearer <token>` from `/api/auth/login`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Accounts, login and password recovery"},
        {"name": "Collections", "description": "Collections of study material"},
        {"name": "Study Items", "description": "Notes, flashcards and quizzes"},
        {"name": "Flashcards", "description": "Flashcard sets and study sessions"},
        {"name": "AI", "description": "AI study tools and text-to-speech"},
        {"name": "Activity", "description": "Recent activity feed"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)

app.state.disable_rate_limits = False


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows the web client to call the API with credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with its status and duration."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Attach the standard security headers to every response."""
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(EnzoLearnException, enzolearn_exception_handler)
app.add_exception_handler(SupabaseClientError, database_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# =============================================================================
# Routers
# =============================================================================

# Every /api router shares one per-client quota
api_rate_limit = [Depends(rate_limit("api"))]

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/auth",
    tags=["Auth"],
    dependencies=api_rate_limit,
)

# Collection endpoints
app.include_router(
    collections.router,
    prefix="/api/collections",
    tags=["Collections"],
    dependencies=api_rate_limit,
)

# Study item endpoints
app.include_router(
    study_items.router,
    prefix="/api/study-items",
    tags=["Study Items"],
    dependencies=api_rate_limit,
)

# Flashcard set endpoints
app.include_router(
    flashcards.router,
    prefix="/api/flashcards",
    tags=["Flashcards"],
    dependencies=api_rate_limit,
)

# AI endpoints
app.include_router(
    ai.router,
    prefix="/api/ai",
    tags=["AI"],
    dependencies=api_rate_limit,
)

# Activity endpoints
app.include_router(
    activity.router,
    prefix="/api/activity",
    tags=["Activity"],
    dependencies=api_rate_limit,
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/health",
    tags=["Health"],
    dependencies=api_rate_limit,
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint - greets the client.
    """
    return {"message": "Welcome to EnzoLearn API"}
