"""
Main API module for the GCS proxy.

Responsibilities:
    - Gate every request behind HTTP Basic Auth (flat username/password list)
    - Forward authenticated GET requests to a Cloud Storage bucket and stream
      the object back, mirroring its metadata headers
    - Answer every other method with 405
    - Render every error as a short plain-text response

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Settings are read once into a ProxySettings object and passed in; the
      object store is built from them unless one is injected.
    - BasicAuthMiddleware runs before routing; ProxyRouter owns method dispatch.

Run:
    python main.py
    uvicorn main:create_app --factory --port 8080
"""

import logging
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from auth.config import parse_credentials
from auth.dependencies import get_current_user
from auth.middleware import BasicAuthMiddleware
from gcs_proxy.config import ProxySettings, load_settings
from gcs_proxy.errors import ProxyError, StartupError, UnsupportedMethod
from gcs_proxy.router import ProxyRouter
from gcs_proxy.storage.base import BaseObjectStore
from gcs_proxy.storage.storage_factory import get_storage

# Every method reaches the router so non-GET requests get the same 405 body.
PROXIED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]

log = logging.getLogger("gcs_proxy")


def create_app(settings: Optional[ProxySettings] = None, store: Optional[BaseObjectStore] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        settings (ProxySettings, optional): Startup configuration. Read from the
            environment when omitted.
        store (BaseObjectStore, optional): Object store to serve from. Built from
            settings when omitted.

    Returns:
        FastAPI: A fully configured application instance.

    Raises:
        StartupError: Missing bucket, unusable storage client, bad realm or
            unknown backend. The process must not serve in that state.
    """
    settings = settings or load_settings()

    # basic console logging (optional)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.log_level)

    if store is None:
        store = get_storage(
            settings.storage_backend,
            bucket_name=settings.bucket_name,
            chunk_size=settings.chunk_size,
        )
    log.info("Proxy storage backend: %s", store.describe())

    credentials = parse_credentials(settings.userpass)
    if not credentials:
        log.warning("USERPASS holds no valid credentials; every request will be rejected")

    router = ProxyRouter(store, index_object=settings.index_object)

    # Docs routes are disabled: every path is an object key.
    app = FastAPI(
        title="GCS Proxy",
        description="HTTP Basic Auth protected proxy for a Cloud Storage bucket",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.router = router
    app.add_middleware(BasicAuthMiddleware, credentials=credentials, realm=settings.realm)

    # ----------------------------------------------------------------
    # Error rendering
    # ----------------------------------------------------------------
    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> Response:
        return PlainTextResponse(exc.body, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == UnsupportedMethod.status_code:
            return PlainTextResponse(
                UnsupportedMethod.body,
                status_code=exc.status_code,
                headers={"Allow": router.allowed_methods},
            )
        return PlainTextResponse(f"{exc.status_code} - {exc.detail}", status_code=exc.status_code,
                                 headers=getattr(exc, "headers", None))

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.api_route("/{object_path:path}", methods=PROXIED_METHODS)
    def proxy(object_path: str, request: Request, username: str = Depends(get_current_user)) -> Response:
        """
        Forward an authenticated request to the router.

        Sync on purpose: store lookups block, so FastAPI runs this in its threadpool.
        """
        log.debug("%s /%s by %s", request.method, object_path, username)
        return router.dispatch(request.method, object_path)

    return app


def run() -> None:
    """Process entrypoint: configure logging, build the app, serve on PORT."""
    logging.basicConfig(level=logging.INFO)
    log.info("starting server...")
    try:
        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level)
        app = create_app(settings)
    except StartupError as exc:
        log.critical("main: %s", exc)
        raise SystemExit(1) from exc

    log.info("listening on port %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
