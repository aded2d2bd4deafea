import math
from typing import Dict, List, Mapping, Optional


def build_provider_headers(bearer: str) -> Dict[str, str]:
    """HTTP headers for the generation provider."""
    return {
        "Authorization": f"Bearer {bearer}",
        "Content-Type": "application/json",
    }


def parse_allowed_origins(raw: Optional[str]) -> List[str]:
    """Split a comma-separated allow-list, dropping blanks."""
    if not raw:
        return []
    return [o.strip() for o in raw.split(",") if o.strip()]


def client_ip(headers: Mapping[str, str], peer_host: Optional[str]) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    return peer_host or "unknown"


def seconds_until(deadline: float, now: float) -> int:
    """Whole seconds left before ``deadline``, never below 1."""
    return max(1, math.ceil(deadline - now))


def parse_retry_after(value: Optional[str], default: int) -> int:
    """Numeric Retry-After header value, else ``default``."""
    if not value:
        return default
    try:
        seconds = math.ceil(float(value.strip()))
    except ValueError:
        return default
    return seconds if seconds > 0 else default
