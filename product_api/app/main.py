"""
Main entrypoint for the Product API.

This module assembles the FastAPI application: it sets up logging,
builds (or receives) the product repository, installs the middleware
chain and the error handlers, and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Importing the app here
makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn product_api.app.main:app --reload

Requests pass through the middleware in this order:
``RequestLoggingMiddleware`` -> ``TokenAuthMiddleware`` -> route handler.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import ProductRepository, load_products
from .core.errors import UTF8JSONResponse, register_exception_handlers
from .core.logging_config import setup_logging
from .core.middleware import RequestLoggingMiddleware
from .core.security import TokenAuthMiddleware

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[ProductRepository] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment.
    repository : Optional[ProductRepository]
        Storage to serve.  When omitted a repository is created and, if
        ``settings.products_file`` is set, seeded from that file.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that seeding can log.
    setup_logging(settings.log_level, settings.log_file or None)

    if repository is None:
        seed = load_products(settings.products_file, settings.layout_date) if settings.products_file else []
        repository = ProductRepository(seed)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        default_response_class=UTF8JSONResponse,
    )
    app.state.settings = settings
    app.state.repository = repository

    register_exception_handlers(app)

    # The middleware added last runs first, so logging wraps authentication.
    app.add_middleware(TokenAuthMiddleware, token=settings.api_token)
    app.add_middleware(RequestLoggingMiddleware, server_addr=settings.server_addr)

    app.include_router(v1_router)

    if not settings.api_token:
        logger.warning("API_TOKEN is empty; every request will be accepted")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
