# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Build the service container from settings (stores, token service,
  upload pipeline) and seed the first admin account and the demo
  catalogue when configured.
* Register CORS, gzip and request-logging middleware.
* Install the JSON error envelope handlers.
* Mount the three feature routers (auth, api, files).
* Expose / (service index) and /health, and serve ``public/`` under
  /static when the directory exists.

Run with:  uvicorn main:app --app-dir backend

Production note
---------------
CORS origins come from settings (CORS_ORIGINS) and default to localhost.
"""

import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from api.demo import seed_demo_products
from api.router import router as api_router
from auth.router import router as auth_router
from core.config import Settings, get_settings
from core.container import build_container
from core.errors import register_exception_handlers
from core.logger import logger
from core.security import get_client_ip
from files.router import router as files_router

_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Bodies and headers (credentials, tokens) are never echoed.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            get_client_ip(request),
            response.status_code,
            elapsed_ms,
        )
        return response


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="API Server", version="1.0.0")
    app.state.container = build_container(settings)

    if settings.first_admin_email and settings.first_admin_password:
        app.state.container.credentials.seed_admin(
            email=settings.first_admin_email,
            password=settings.first_admin_password,
            name=settings.first_admin_name,
        )
    if settings.seed_demo_products:
        seed_demo_products(app.state.container.products)

    # -- Middleware ------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(_RequestLogMiddleware)

    register_exception_handlers(app)

    # -- Routers ---------------------------------------------------------
    app.include_router(auth_router)
    app.include_router(api_router)
    app.include_router(files_router)

    @app.on_event("startup")
    async def _on_startup():
        logger.info("API server starting up (uploads in %s)", settings.upload_dir)

    @app.on_event("shutdown")
    async def _on_shutdown():
        logger.info("API server shutting down")

    @app.get("/")
    def index():
        return {
            "success": True,
            "message": "API server is running",
            "version": settings.api_version,
            "documentation": "/docs",
            "endpoints": {
                "api": "/api",
                "auth": "/auth",
                "files": "/files",
                "static": "/static",
            },
        }

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Mounted last so the API routes are matched first
    if _PUBLIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=str(_PUBLIC_DIR)), name="static")

    return app


app = create_app()
