"""Entry point for the Product API server.

Loads configuration from a ``.env`` file in the current directory (if
present) and serves the application with Uvicorn on ``SERVER_ADDR``.
The ``.env`` file must be loaded before the application package is
imported because settings are read from the environment at import.

Supported variables: SERVER_ADDR, API_TOKEN, LAYOUT_DATE,
PRODUCTS_FILE, LOG_LEVEL, LOG_FILE, PROJECT_NAME, API_VERSION.

Usage:
    python run.py
"""
import logging

from dotenv import load_dotenv
from uvicorn import Config, Server


def main() -> None:
    """Start the API using Uvicorn."""
    load_dotenv()

    from product_api.app.core.config import settings
    from product_api.app.main import app

    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Serving %s on %s", settings.project_name, settings.server_addr)
    server.run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
