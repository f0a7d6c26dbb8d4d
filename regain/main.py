"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from regain.config.settings import get_settings
from regain.core.error_handlers import domain_error_handler
from regain.core.exceptions import DomainError
from regain.core.logging import configure_logging
from regain.db.database import engine, init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging()

    # Startup: Initialize database
    await init_db()

    yield
    # Shutdown: Cleanup resources
    from regain.llm import cleanup_llm_provider
    await cleanup_llm_provider()

    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Generates a user's weekly training sessions from a fixed variation catalog",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(DomainError, domain_error_handler)

    from regain.api.routes import generation_router, health_router

    app.include_router(health_router)
    app.include_router(generation_router, prefix="/api/users", tags=["Weekly Plans"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("regain.main:app", host="0.0.0.0", port=8000, reload=True)
