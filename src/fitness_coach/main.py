"""FastAPI application for the Fitness Coach."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.exception_handlers import register_exception_handlers
from .api.routes import coach
from .api.schemas import HealthResponse
from .config import Settings, get_settings
from .utils.log_sanitizer import configure_logging

# Root handler with the sanitizer attached, before any logging occurs
configure_logging(get_settings().log_level)

logger = logging.getLogger(__name__)


def check_model_configuration(settings: Settings) -> bool:
    """Log whether the completion endpoint is usable; never logs the key."""
    configured = True
    if not settings.zhipu_api_key:
        logger.warning(
            "ZHIPU_API_KEY is not configured. Chat and workout generation "
            "will fail until it is set."
        )
        configured = False
    else:
        logger.info("ZHIPU_API_KEY: configured")

    if not settings.zhipu_model:
        logger.warning("ZHIPU_MODEL is empty. Set a model name, e.g. glm-3-turbo.")
        configured = False
    else:
        logger.info(f"Model: {settings.zhipu_model} at {settings.llm_base_url}")
    return configured


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting Fitness Coach v{__version__}")
    check_model_configuration(settings)
    if settings.llm_max_retries > 0:
        logger.info(f"Gateway retries enabled: up to {settings.llm_max_retries}")

    yield

    logger.info("Shutting down Fitness Coach")


app = FastAPI(
    title="Fitness Coach API",
    description="AI workout generation and coaching chat",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# The front end calls /api/ai-coach/...; both mounts serve the same routes
app.include_router(coach.router, prefix="/ai-coach", tags=["ai-coach"])
app.include_router(coach.router, prefix="/api/ai-coach", include_in_schema=False)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    current = get_settings()
    return HealthResponse(
        status="healthy",
        service="fitness-coach-api",
        model_configured=bool(current.zhipu_api_key and current.zhipu_model),
    )
