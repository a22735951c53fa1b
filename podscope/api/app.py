"""FastAPI application factory for podscope.

Usage::

    from podscope.api.app import create_app

    app = create_app(resolver=resolver, cache_set=cache_set)

The factory is used by both the production bootstrap (``podscope.app``) and
unit tests.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from podscope.api.routes import router
from podscope.api.schemas import ErrorResponse
from podscope.errors import ResolutionError
from podscope.observability.logging import get_logger

_log = get_logger("api.app")

_API_PREFIX = "/api/v1"

_STATUS_BY_CODE = {
    "UNKNOWN_RESOURCE_KIND": 400,
    "INVALID_REFERENCE": 400,
    "NOT_FOUND": 404,
    "NO_PODS_FOUND": 404,
    "NOT_READY": 503,
    "SYNC_TIMEOUT": 503,
}


def create_app(resolver: Any, cache_set: Any, config: Any = None) -> FastAPI:
    """Create and configure the podscope FastAPI application.

    Args:
        resolver:  ResourceResolver instance.
        cache_set: ResourceCacheSet instance, used for readiness reporting.
        config:    PodscopeConfig, kept on app.state for handlers.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from podscope import __version__

    app = FastAPI(
        title="podscope",
        summary="Resolve Kubernetes resource references to pods",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.resolver = resolver
    app.state.cache_set = cache_set
    app.state.config = config

    app.include_router(router, prefix=_API_PREFIX)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(ResolutionError)
    async def resolution_exception_handler(
        _request: Request,
        exc: ResolutionError,
    ) -> JSONResponse:
        """Map the resolution error taxonomy onto HTTP status codes."""
        return JSONResponse(
            status_code=_STATUS_BY_CODE.get(exc.code, 500),
            content=ErrorResponse(error=exc.code, detail=str(exc)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = exc.errors()
        first_msg = ""
        if errors:
            locs = errors[0].get("loc", ())
            field = str(locs[-1]) if locs else ""
            first_msg = f"{field}: {errors[0].get('msg', '')}" if field else str(errors[0].get("msg", ""))
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_REFERENCE", detail=first_msg).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
