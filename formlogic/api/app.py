"""
FastAPI application factory for the form logic service.

Creates and configures the FastAPI app, initializes the logic index
cache and routes from environment settings.

Run with:
    uvicorn formlogic.api.app:app --reload
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formlogic.api.routes import configure_routes, router
from formlogic.core.cache import DEFAULT_MAX_ENTRIES, LogicIndexCache

# Load environment variables from .env
load_dotenv()

# Logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _is_truthy(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    application = FastAPI(
        title="Form Logic",
        description="Conditional visibility and submission gating for forms",
        version="0.1.0",
    )

    allowed_origins = os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Compiled logic is shared read-only across requests, keyed by form version
    index_cache = None
    if _is_truthy(os.getenv("LOGIC_CACHE_ENABLED"), default=True):
        max_entries = int(os.getenv("LOGIC_CACHE_MAX_ENTRIES", str(DEFAULT_MAX_ENTRIES)))
        index_cache = LogicIndexCache(max_entries=max_entries)
        logger.info("Logic index cache enabled (max %d entries)", max_entries)
    else:
        logger.info("Logic index cache disabled")

    configure_routes(index_cache, forms_dir=os.getenv("FORMS_DIR"))
    application.include_router(router, prefix="/api")

    return application


# Create the app instance (used by uvicorn)
app = create_app()
