"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from traincycle.config.settings import get_settings
from traincycle.core.error_handlers import domain_error_handler
from traincycle.core.exceptions import DomainError
from traincycle.core.logging import configure_logging, get_logger
from traincycle.db.database import close_engine, init_db
from traincycle.middleware import RequestContextMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    await init_db()
    logger.info("startup_complete", app=app.title)
    yield
    await close_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Training session lifecycle and progressive workout generation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(DomainError, domain_error_handler)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    from traincycle.api.routes import settings_router, training_router, workouts_router

    app.include_router(workouts_router, prefix="/workouts", tags=["Workouts"])
    app.include_router(training_router, prefix="/training", tags=["Training"])
    app.include_router(settings_router, prefix="/settings", tags=["Settings"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("traincycle.main:app", host="0.0.0.0", port=8000, reload=True)
