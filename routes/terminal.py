import json
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from errors import (
    ClientInputError,
    ConfigurationError,
    MethodNotAllowed,
    RateLimited,
    TerminalError,
    TransportError,
    UpstreamError,
)
from models import Mode, TerminalRequest, Tone
from prompt_packs import build_prompt
from upstream import call_provider
from utils import client_ip

logger = structlog.get_logger("terminal")

router = APIRouter(tags=["terminal"])

# OPTIONS never reaches the router: the origin guard middleware answers it.
HANDLED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _read_json_body(raw: bytes) -> Dict[str, Any]:
    """Decode a POST body into a dict.

    Some clients send the JSON document as a JSON string, so one extra
    decoding pass is applied when the first pass yields a string.
    """
    if not raw or not raw.strip():
        raise ClientInputError("Empty request body.")
    try:
        body = json.loads(raw)
        if isinstance(body, str):
            body = json.loads(body)
    except ValueError:
        raise ClientInputError("Invalid JSON body.")
    if not isinstance(body, dict):
        raise ClientInputError("Invalid JSON body.")
    return body


def _liveness_payload(request: Request) -> Dict[str, Any]:
    pack = request.app.state.prompt_pack
    example = pack.example
    return {
        "ok": True,
        "message": (
            "Endpoint is up. Use POST with JSON: { text, mode, tone }. "
            f"Example: {{ text:'{example.text}', mode:'{example.mode.value}', tone:'{example.tone.value}' }}"
        ),
        "example": {"text": example.text, "mode": example.mode.value, "tone": example.tone.value},
        "modes": [m.value for m in Mode],
        "tones": [t.value for t in Tone],
    }


async def _generate(request: Request) -> Dict[str, Any]:
    settings = request.app.state.settings

    if not settings.provider_api_key:
        raise ConfigurationError("Missing PROVIDER_API_KEY in server environment.")

    ip = client_ip(request.headers, request.client.host if request.client else None)
    decision = request.app.state.rate_limiter.hit(ip)
    if not decision.allowed:
        logger.warning("Rate limited", ip=ip, retry_after_seconds=decision.retry_after_seconds)
        raise RateLimited(
            "Too many requests. Slow down and retry shortly.",
            retry_after_seconds=decision.retry_after_seconds,
        )

    body = _read_json_body(await request.body())
    req = TerminalRequest.from_payload(body, max_chars=settings.max_input_chars)
    bundle = build_prompt(req, request.app.state.prompt_pack, server_persona=settings.persona_override)

    logger.info(
        "Terminal request accepted",
        mode=req.mode.value,
        tone=req.tone.value,
        chars=len(req.text),
        persona_override=bool(req.persona_override),
    )

    upstream = await run_in_threadpool(call_provider, bundle, settings)
    if not upstream.text:
        logger.error("Provider returned no usable text", status=upstream.status)
        raise UpstreamError("Upstream returned no usable text.", details=upstream.raw_body)

    return {"ok": True, "result": upstream.text, "mode": req.mode.value, "tone": req.tone.value}


@router.api_route("/api/terminal", methods=HANDLED_METHODS)
async def terminal(request: Request):
    if request.method == "GET":
        return _liveness_payload(request)
    if request.method != "POST":
        raise MethodNotAllowed()

    try:
        return await _generate(request)
    except TerminalError:
        raise
    except Exception as e:
        logger.exception("Unexpected error while handling terminal request")
        raise TransportError("Unexpected server error.", details=str(e)) from e
