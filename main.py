"""
prepMSCEIT - Emotional Intelligence Test Preparation

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prepmsceit.config.settings import get_settings
from prepmsceit.api.router import api_router, functions_router
from prepmsceit.api.dependencies import cleanup

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting prepMSCEIT...")
    settings = get_settings()
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")

    for name, value in (
        ("SUPABASE_SERVICE_ROLE_KEY", settings.supabase_service_role_key),
        ("GEMINI_API_KEY", settings.gemini_api_key),
        ("OPENAI_API_KEY", settings.openai_api_key),
        ("RESEND_API_KEY", settings.resend_api_key),
        ("LEAD_WEBHOOK_URL", settings.lead_webhook_url),
    ):
        if not value:
            logger.warning(f"{name} is not set; dependent features will degrade")

    yield

    # Shutdown
    logger.info("Shutting down prepMSCEIT...")
    await cleanup()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Emotional Intelligence Test Preparation",
    version=settings.app_version,
    lifespan=lifespan,
)

# Function handlers accept any origin unless CORS_ORIGINS narrows the list
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Mount routes
app.include_router(api_router, prefix="/api")
app.include_router(functions_router, prefix="/functions")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
