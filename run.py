"""Entry point for the chat room API.

Launches the FastAPI application with uvicorn.  It is intended to be
executed from the project root, for example in Docker, where you only
specify a single Python file to run.

Configuration is read from environment variables: ``DATABASE_URL``
selects the SQLite database file, ``HOST`` and ``PORT`` (default
``0.0.0.0:5000``) the listening address.  See
``chat_room_api/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from chat_room_api.app.core.config import settings
from chat_room_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Starting chat room API on %s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
