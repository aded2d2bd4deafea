# upstream.py
# Single outbound call to the text-generation provider, plus text extraction
# over the response shapes it is known to return.

from typing import Any, Callable, Optional, Tuple

import requests
import structlog

from config import Settings
from errors import ConfigurationError, TransportError, UpstreamError, UpstreamThrottled
from models import PromptBundle, UpstreamResponse
from utils import build_provider_headers, parse_retry_after

logger = structlog.get_logger("upstream")

DEFAULT_RETRY_AFTER_S = 25


# ----------------------------
# Response text extractors
# ----------------------------

def _flat_output_text(data: Any) -> Optional[str]:
    text = data.get("output_text") if isinstance(data, dict) else None
    return text if isinstance(text, str) else None


def _output_content_items(data: Any) -> Optional[str]:
    output = data.get("output") if isinstance(data, dict) else None
    if not isinstance(output, list):
        return None
    for item in output:
        content = item.get("content") if isinstance(item, dict) else None
        if not isinstance(content, list):
            continue
        for c in content:
            if isinstance(c, dict) and c.get("type") == "output_text" and isinstance(c.get("text"), str):
                return c["text"]
    return None


def _first_choice(data: Any) -> Optional[dict]:
    choices = data.get("choices") if isinstance(data, dict) else None
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return None


def _chat_message_content(data: Any) -> Optional[str]:
    choice = _first_choice(data)
    message = choice.get("message") if choice else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None


def _completion_text(data: Any) -> Optional[str]:
    choice = _first_choice(data)
    text = choice.get("text") if choice else None
    return text if isinstance(text, str) else None


# Priority order matters: newest shape first.
EXTRACTORS: Tuple[Callable[[Any], Optional[str]], ...] = (
    _flat_output_text,
    _output_content_items,
    _chat_message_content,
    _completion_text,
)


def extract_output_text(data: Any) -> str:
    """First non-empty text across known shapes, else ``""``."""
    for extractor in EXTRACTORS:
        text = extractor(data)
        if text and text.strip():
            return text
    return ""


# ----------------------------
# Provider call
# ----------------------------

def _error_message(data: Any, status: int) -> str:
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if data.get("message"):
            return str(data["message"])
    return f"Upstream error ({status})"


def call_provider(bundle: PromptBundle, settings: Settings) -> UpstreamResponse:
    """POST the bundle to the provider. Raises a TerminalError subclass on failure."""
    if not settings.provider_api_key:
        raise ConfigurationError("Missing PROVIDER_API_KEY in server environment.")

    url = f"{settings.provider_base_url}/responses"
    payload = {
        "model": settings.provider_model,
        "instructions": bundle.instructions,
        "input": bundle.user_block,
        "temperature": settings.provider_temperature,
        "text": {"format": {"type": "text"}},
        "max_output_tokens": settings.max_output_tokens,
    }
    headers = build_provider_headers(settings.provider_api_key)

    try:
        r = requests.post(url, json=payload, headers=headers, timeout=settings.provider_timeout_s)
    except requests.RequestException as e:
        logger.error("Provider call failed", model=settings.provider_model, error=str(e))
        raise TransportError("Server failed while calling the provider.", details=str(e)) from e

    try:
        data: Any = r.json()
    except ValueError:
        data = None
    raw_body = data if data is not None else r.text

    if r.status_code == 429:
        retry_after = parse_retry_after(r.headers.get("Retry-After"), DEFAULT_RETRY_AFTER_S)
        logger.warning("Provider throttled", model=settings.provider_model, retry_after_seconds=retry_after)
        raise UpstreamThrottled(
            "Rate limited by model/provider. Retry shortly.",
            retry_after_seconds=retry_after,
            details=raw_body,
        )

    if not r.ok:
        logger.error("Provider error", status=r.status_code, model=settings.provider_model)
        raise UpstreamError(
            _error_message(data, r.status_code),
            status_code=r.status_code,
            details=raw_body,
        )

    return UpstreamResponse(
        ok=True,
        status=r.status_code,
        text=extract_output_text(data),
        raw_body=raw_body,
    )
