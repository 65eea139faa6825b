"""
Main entrypoint for the Orders API.

This module assembles the FastAPI application: it sets up logging,
builds the order repository named by the configuration, wires it into
``OrderService`` and installs the request-id middleware and the error
handlers.  ``create_app`` does the work; the module-level ``app`` is
the instance served by uvicorn, e.g.::

    uvicorn orders_api.app.main:app --reload

Tests call ``create_app`` with their own settings or repository so
each test gets an isolated store.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.router import router
from .core.config import Settings, settings as default_settings
from .core.errors import OrderError, ValidationError
from .core.logging_config import bind_request_id, get_request_id, reset_request_id, setup_logging
from .repositories import OrderRepository, build_repository
from .services.order_service import OrderService

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


def _error_response(error: OrderError) -> JSONResponse:
    error.request_id = error.request_id or get_request_id()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[OrderRepository] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the environment-derived
        module settings.
    repository : Optional[OrderRepository]
        Repository to inject.  When omitted one is built from
        ``settings`` with :func:`build_repository`.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so the repository can log
    # its startup.
    setup_logging(settings.log_level)

    if repository is None:
        repository = build_repository(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.repository = repository
    app.state.order_service = OrderService(repository)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        token = bind_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id = get_request_id()
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
                response = _error_response(OrderError("internal error", request_id=request_id))
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            reset_request_id(token)

    @app.exception_handler(OrderError)
    async def order_error_handler(request: Request, exc: OrderError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed bodies are client faults like any other validation
        # failure, so they use the same 400 response.
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return _error_response(ValidationError(problems or "invalid request"))

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        app.state.repository.close()

    app.include_router(router)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
