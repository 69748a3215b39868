"""
Editorial Ledger - FastAPI Application
Single MCP endpoint in front of the campaign ledger database.
"""
import logging
from contextlib import asynccontextmanager
from typing import Mapping, Optional

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from editorial_ledger import database
from editorial_ledger.actions.registry import ActionRegistry, Handler, load_extensions
from editorial_ledger.actions.router import ActionRouter
from editorial_ledger.api import mcp
from editorial_ledger.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    extensions: Optional[Mapping[str, Handler]] = None
) -> FastAPI:
    """
    Build the application. ``extensions`` adds deployment-specific actions on
    top of those named in settings.EXTENSION_MODULES.
    """
    settings = settings or default_settings
    engine = engine or database.engine

    extended = load_extensions(settings.extension_modules)
    if extensions:
        extended.update(extensions)
    registry = ActionRegistry(extended=extended)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        # Startup
        if settings.INIT_DB_ON_STARTUP:
            await database.init_db(engine)
        logger.info(
            f"{settings.SERVICE_NAME} {settings.SERVICE_VERSION} ready with "
            f"{len(registry.core_actions)} core and {len(registry.extended_actions)} extended actions"
        )
        yield
        # Shutdown
        await engine.dispose()

    app = FastAPI(
        title="Editorial Ledger API",
        description="Orchestration-native campaign ledger for autonomous editorial agents",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.session_factory = database.make_session_factory(engine)
    app.state.action_router = ActionRouter(registry, settings)

    app.include_router(mcp.router, prefix=settings.API_PREFIX)
    app.include_router(mcp.health_router)  # /health -> service description

    return app


logging.basicConfig(level=default_settings.LOG_LEVEL.upper())

app = create_app()
