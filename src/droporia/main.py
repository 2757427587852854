"""FastAPI application entrypoint for the Droporia service."""
from __future__ import annotations

import logging
from typing import Final, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from droporia.api.http import MISSING_URL_MESSAGE, error_response, router as api_router
from droporia.core.config import Settings, get_settings
from droporia.core.logging_cfg import setup_logging
from droporia.services.extractor import ExtractorClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    extractor: Optional[ExtractorClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Parameters
    ----------
    settings: Optional[Settings]
        Settings to build the app with; defaults to the cached process settings.
    extractor: Optional[ExtractorClient]
        Extraction client to hand to request handlers; built from settings when omitted.

    Notes
    -----
    - This is the composition root: the extraction client is created here once and
      stored on ``app.state.extractor``. Handlers receive it by dependency injection;
      a ``None`` client is reported to callers as an unavailable extractor.
    - Logging is configured up front based on settings.
    - Unknown routes and malformed request bodies answer with the same
      ``{"success": false, ...}`` envelope as the API.

    Returns
    -------
    FastAPI
        The configured FastAPI application.
    """

    settings = settings if settings is not None else get_settings()
    setup_logging(settings.debug)

    app: FastAPI = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.extractor = extractor if extractor is not None else ExtractorClient.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # A wrong method on a known path is reported like an unknown path
        if exc.status_code in (404, 405):
            return error_response(404, "API endpoint not found.")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # A missing or non-JSON body carries no usable URL
        return error_response(400, MISSING_URL_MESSAGE)

    @app.get("/", tags=["system"])
    def index() -> dict[str, str]:
        """Welcome payload confirming the API is reachable."""

        return {"message": f"{settings.app_name} Backend API is up and running!"}

    @app.get("/health", tags=["system"])
    def health(request: Request) -> dict[str, str]:
        """Health check endpoint.

        Notes
        -----
        - Lightweight liveness probe intended for readiness checks; does not perform
          external calls. Reports whether an extraction client is configured.

        Returns
        -------
        dict[str, str]
            A simple status payload.
        """

        ready: bool = getattr(request.app.state, "extractor", None) is not None
        return {"status": "ok", "extractor": "ready" if ready else "unavailable"}

    return app


app: Final[FastAPI] = create_app()


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""

    import uvicorn

    settings: Settings = get_settings()
    logger.info("Starting server", extra={"host": settings.host, "port": settings.port})
    uvicorn.run("droporia.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
