"""Entry point that serves the Registration Desk API with Uvicorn.

Host and port are read from environment variables ``API_HOST`` and
``API_PORT`` (defaults ``0.0.0.0`` and ``8000``).  All other settings
come from ``core.config``.

Usage:
    registration-desk
"""
import asyncio
import os

from uvicorn import Config, Server

from registration_desk_api.app.core.config import settings


async def serve() -> None:
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    config = Config(
        app="registration_desk_api.app.main:app",
        host=host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(serve())
    except (KeyboardInterrupt, SystemExit):
        pass


if __name__ == "__main__":
    main()
