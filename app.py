# app.py
# FastAPI backend for the PSYOPANIME AI terminal relay
# Goals:
# - One endpoint that turns (text, mode, tone) into a structured generation
# - Lenient enum handling: unknown mode/tone fall back to defaults
# - Origin guard with a permissive fallback when no allow-list is set
# - Best-effort per-IP rate limit held in process memory
# - Every failure rendered as {"ok": false, "error": ...}

from typing import Optional

import logging
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables
from dotenv import load_dotenv

from config import Settings, load_settings
from cors import cors_headers
from errors import MethodNotAllowed, TerminalError
from prompt_packs import get_pack, PROMPT_PACKS
from rate_limit import RateLimitStore

load_dotenv()

# ----------------------------
# Environment & settings
# ----------------------------

settings = load_settings()

# --- Configure structlog + stdlib logging
_log_level = getattr(logging, settings.log_level, logging.INFO)
logging.basicConfig(format="%(message)s", level=_log_level,)
structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(_log_level), processors=[structlog.processors.add_log_level, structlog.processors.TimeStamper(fmt="iso"), structlog.processors.format_exc_info, structlog.processors.JSONRenderer(), ],)
logger = structlog.get_logger("app")

if not settings.provider_api_key:
    # Not fatal: POST answers 500 until the key is configured
    logger.warning("PROVIDER_API_KEY is not set; generation requests will fail")


# ----------------------------
# FastAPI app
# ----------------------------
from routes.terminal import router as terminal_router


def create_app(
    app_settings: Optional[Settings] = None,
    rate_limiter: Optional[RateLimitStore] = None,
) -> FastAPI:
    app_settings = app_settings or settings
    api = FastAPI(title="PSYOPANIME Terminal — Backend")

    if app_settings.prompt_pack not in PROMPT_PACKS:
        logger.warning("Unknown prompt pack, using default", prompt_pack=app_settings.prompt_pack)

    api.state.settings = app_settings
    api.state.prompt_pack = get_pack(app_settings.prompt_pack)
    api.state.rate_limiter = rate_limiter or RateLimitStore(
        max_requests=app_settings.rate_limit_max_requests,
        window_s=app_settings.rate_limit_window_s,
    )

    @api.middleware("http")
    async def origin_guard(request: Request, call_next):
        headers = cors_headers(request.headers.get("origin"), request.app.state.settings.allowed_origins)
        # Pre-flight never reaches the router
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)
        response = await call_next(request)
        response.headers.update(headers)
        return response

    @api.exception_handler(TerminalError)
    async def terminal_error_handler(request: Request, exc: TerminalError):
        headers = None
        if exc.retry_after_seconds is not None:
            headers = {"Retry-After": str(exc.retry_after_seconds)}
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)

    @api.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Routing errors (404, unsupported verbs) keep the {ok, error} shape
        error = MethodNotAllowed().message if exc.status_code == 405 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": error},
            headers=getattr(exc, "headers", None),
        )

    api.include_router(terminal_router)
    return api


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
