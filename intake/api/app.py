from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from intake.api.errors import register_error_handlers
from intake.api.routes import activities, analyses, documents, drive, ocr, stats, telegram
from intake.api.routes import connections as connection_routes
from intake.config.settings import Settings
from intake.database.connection import apply_schema, close_pool, init_pool
from intake.logging.logger import Log
from intake.processor.orchestrator import DocumentOrchestrator, build_orchestrator
from intake.services.connection_service import ConnectionService, build_connection_service


def create_app(
    settings: Settings | None = None,
    orchestrator: DocumentOrchestrator | None = None,
    connections: ConnectionService | None = None,
) -> FastAPI:
    """Build the HTTP application.

    When no orchestrator is passed one is built from settings, and the
    PostgreSQL pool (if that backend is selected) is opened on startup and
    closed on shutdown.
    """
    settings = settings or Settings()
    Log.configure(settings.log_level)
    manage_pool = orchestrator is None and settings.store_backend.lower() == "postgres"
    orchestrator = orchestrator or build_orchestrator(settings)
    connections = connections or build_connection_service(
        settings,
        orchestrator.store,
        orchestrator.cloud_storage,
        orchestrator.notifications.notifier,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if manage_pool:
            init_pool(settings)
            apply_schema()
        orchestrator.start()
        Log.info(f"Intake API started ({settings.app_env}, store={settings.store_backend})")
        try:
            yield
        finally:
            orchestrator.shutdown()
            if manage_pool:
                close_pool()
            Log.info("Intake API stopped")

    app = FastAPI(title="Document Intake", lifespan=lifespan)
    app.state.settings = settings
    app.state.orchestrator = orchestrator
    app.state.connections = connections

    api = APIRouter(prefix="/api")
    routers = (documents, analyses, ocr, activities, stats, connection_routes, drive, telegram)
    for module in routers:
        api.include_router(module.router)
    app.include_router(api)
    register_error_handlers(app)
    return app
