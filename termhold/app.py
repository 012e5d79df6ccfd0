"""FastAPI application with the terminal WebSocket and session management routes."""

import logging
import os
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Query, WebSocket
from fastapi.responses import JSONResponse

from . import __version__
from .composition import create_container
from .container import Container
from .infrastructure.web import FastAPIWebSocketAdapter
from .logging_setup import setup_logging_from_env

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _parse_positive(value: str | None, default: int, maximum: int | None = None) -> int:
    """Parse a query parameter, falling back to ``default`` when invalid."""
    try:
        parsed = int(value) if value else default
    except ValueError:
        return default
    if parsed < 1 or (maximum is not None and parsed > maximum):
        return default
    return parsed


def create_app(container: Container | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Prewired container; built from the environment when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        if container is None:
            setup_logging_from_env()
            config_path = os.environ.get("TERMHOLD_CONFIG_PATH", "termhold.yaml")
            cwd = os.environ.get("TERMHOLD_CWD")
            app.state.container = create_container(config_path=config_path, cwd=cwd)
        else:
            app.state.container = container

        logger.info("termhold server started")

        yield

        # Shutdown
        await app.state.container.session_registry.close_all()
        logger.info("termhold server stopped")

    app = FastAPI(
        title="termhold",
        description="Persistent terminal sessions over WebSocket",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        container: Container = app.state.container
        return {
            "status": "healthy",
            "sessions": container.session_registry.count(),
        }

    @app.get("/api/terminal/sessions")
    async def list_sessions(
        page: str | None = Query(None),
        page_size: str | None = Query(None),
    ):
        """List sessions, paginated in creation order."""
        container: Container = app.state.container
        result = container.session_registry.list_page(
            page=_parse_positive(page, 1),
            page_size=_parse_positive(page_size, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE),
        )
        return result.to_dict()

    @app.delete("/api/terminal/sessions")
    async def delete_session(session_id: str | None = Query(None, alias="id")):
        """Delete a session, killing its process."""
        if not session_id:
            return JSONResponse({"error": "missing id"}, status_code=400)

        container: Container = app.state.container
        removed = await container.session_registry.remove(session_id)
        logger.info("Session delete requested session_id=%s removed=%s", session_id, removed)
        return {"status": "ok"}

    @app.websocket("/api/terminal")
    async def websocket_terminal(
        websocket: WebSocket,
        session_id: str | None = Query(None),
        cwd: str | None = Query(None),
        name: str | None = Query(None),
    ):
        """WebSocket endpoint for terminal communication."""
        await websocket.accept()
        logger.info(
            "WebSocket accepted client=%s session_id=%s cwd=%s",
            getattr(websocket.client, "host", None),
            session_id,
            cwd,
        )

        container: Container = websocket.app.state.container
        connection = FastAPIWebSocketAdapter(websocket)

        try:
            await container.connection_bridge.handle(
                connection,
                session_id=session_id,
                name=name,
                cwd=cwd,
            )
        except Exception:
            logger.exception("WebSocket error session_id=%s", session_id)
            with suppress(Exception):
                await connection.close(code=1011)
        finally:
            logger.info("WebSocket handler finished session_id=%s", session_id)

    return app
