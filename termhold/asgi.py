"""ASGI application factory for uvicorn.

Usage:
    uvicorn termhold.asgi:create_app_from_env --factory
"""

from fastapi import FastAPI


def create_app_from_env() -> FastAPI:
    """Create the FastAPI app; the container is built at startup from environment variables.

    Environment variables:
        TERMHOLD_CONFIG_PATH: Path to config file (default: termhold.yaml)
        TERMHOLD_CWD: Working directory for new sessions
        TERMHOLD_LOG_LEVEL: Log level name
    """
    from termhold.app import create_app

    return create_app()
