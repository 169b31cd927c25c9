from __future__ import annotations

import logging
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from journal_timeline.core.config import settings
from journal_timeline.routes.timeline import ERROR_REFERENCE_HEADER
from journal_timeline.routes.timeline import router as timeline_router
from journal_timeline.services.error_log import log_system_error
from journal_timeline.services.privacy import scrub_sentry_event

app = FastAPI(title="Journal Timeline API", version="0.1.0")


def _init_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.strip().upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _init_sentry() -> None:
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        integrations=[FastApiIntegration()],
        traces_sample_rate=max(0.0, min(settings.sentry_traces_sample_rate, 1.0)),
        send_default_pii=False,
        before_send=scrub_sentry_event,
        environment=settings.app_env,
    )


_init_logging()
_init_sentry()


def _origin(url: str) -> str:
    # FRONTEND_URL may carry a trailing slash or a path; CORS compares origins.
    p = urlparse(url)
    if p.scheme and p.netloc:
        return f"{p.scheme}://{p.netloc}"
    return url.rstrip("/")


_ALLOWED_ORIGINS = sorted(
    {
        _origin(str(settings.frontend_url)),
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    }
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_server_error_responses(request: Request, call_next):
    response = await call_next(request)
    already_logged = ERROR_REFERENCE_HEADER in response.headers
    if response.status_code >= 500 and not already_logged:
        await log_system_error(
            route=str(request.url.path),
            message=f"Server response status {response.status_code}",
            meta={
                "status_code": response.status_code,
                "method": request.method,
                "path": str(request.url.path),
            },
        )
    return response


@app.get("/health")
async def health() -> dict:
    return {"ok": True}


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Best-effort: never block the response on logging.
    await log_system_error(
        route=str(request.url.path),
        message="Unhandled server error",
        err=exc,
        meta={"method": request.method},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(timeline_router, prefix="/api")
