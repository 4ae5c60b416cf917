from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, load_settings
from .engines import FortiGuardEngine, TalosEngine
from .logger import configure_logging, get_logger
from .models import ErrorResponse, ScanResponse
from .scanner import EmptyBatchError, scan

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """Build the API app. `transport` lets callers swap the upstream network layer."""
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(timeout=settings.upstream_timeout_s, transport=transport) as client:
            app.state.talos = TalosEngine(settings.talos, client)
            app.state.fortiguard = FortiGuardEngine(settings.fortiguard, client)
            logger.info(
                "engines_ready",
                talos=app.state.talos.enabled,
                fortiguard=app.state.fortiguard.enabled,
                scan_concurrency=settings.scan_concurrency,
            )
            yield

    app = FastAPI(title="PolicyScan Agent", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EmptyBatchError)
    async def empty_batch_handler(request: Request, exc: EmptyBatchError):
        return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.post("/api/scan", response_model=ScanResponse)
    async def scan_endpoint(request: Request, payload: Any = Body(None)):
        # Any JSON body is accepted; only an object can carry a "urls" batch.
        urls = payload.get("urls") if isinstance(payload, dict) else None
        state = request.app.state
        results = await scan(
            urls,
            state.talos,
            state.fortiguard,
            concurrency=settings.scan_concurrency,
        )
        return ScanResponse(results=results)

    return app


app = create_app()
