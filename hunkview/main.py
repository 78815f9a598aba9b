"""
Main FastAPI application module.

This module initializes the FastAPI application and includes route definitions.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hunkview import __version__
from hunkview.api.routes import api_router
from hunkview.core.logging_config import get_logger, setup_logging

# Initialize logging
setup_logging()
logger = get_logger(__name__)


def create_application() -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    application = FastAPI(
        title="hunkview",
        description="Answers pull request review comments with a side-by-side view of the diff",
        version=__version__,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure this appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router)

    @application.on_event("startup")
    async def startup_event():
        logger.info("Starting hunkview API")

    @application.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down hunkview API")

    return application


app = create_application()


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting hunkview server in development mode")
    uvicorn.run(
        "hunkview.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload for development
        log_level="info",
    )
