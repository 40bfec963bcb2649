"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from kanban_api.core.config import Settings, settings as default_settings
from kanban_api.core.container import build_container
from kanban_api.core.errors import register_exception_handlers
from kanban_api.core.middleware import install_middleware
from kanban_api.api.routes import auth, boards

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown"""
    logger.info("Starting %s", app.title)
    yield
    logger.info("Shutting down %s", app.title)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Stores, services and token settings are created once here and shared
    through app.state.container; handlers reach them via dependencies.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Users, JWT authentication and boards",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.container = build_container(settings)

    install_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(boards.router, prefix=settings.API_PREFIX)

    @app.get("/health")
    def health():
        """Health check endpoint - used by monitoring/deployment tools"""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "kanban_api.main:app",
        host=default_settings.SERVER_HOST,
        port=default_settings.SERVER_PORT,
    )
