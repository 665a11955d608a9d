"""
FastAPI application for NeuroLearn progress.

Provides REST API endpoints for the web frontend: level, streaks,
activity chart, badges, completion actions and group leaderboards.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import config
from src.core.domain.errors import InvalidArgument
from src.database.config import close_db, init_db
from src.interfaces.api.routers import completion, groups, stats, user

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database connection on startup, close on shutdown."""
    await init_db()
    yield
    await close_db()


app = FastAPI(
    title="NeuroLearn Progress API",
    description="XP, levels, streaks and badges for NeuroLearn",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS: frontend + local development
cors_origins = [
    "http://localhost:3000",  # Local Next.js development
    "http://127.0.0.1:3000",
]

if config.FRONTEND_URL:
    frontend_url = config.FRONTEND_URL.rstrip("/")
    cors_origins.append(frontend_url)
    logger.info(f"Added frontend URL to CORS origins: {frontend_url}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    """Domain validation errors are client errors."""
    logger.warning(f"Invalid argument on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


# Include routers
app.include_router(user.router)
app.include_router(stats.router)
app.include_router(completion.router)
app.include_router(groups.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "NeuroLearn Progress API"}


@app.get("/health")
async def health():
    """Health check for monitoring."""
    return {"status": "healthy"}
