# cors.py
# Origin guard for the terminal endpoint.
# Unlisted origins get no Access-Control-Allow-Origin header; the request
# itself is still served.

from typing import Dict, List, Optional

ALLOW_METHODS = "GET,POST,OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
MAX_AGE_S = "86400"


def origin_allowed(origin: str, allowed: List[str]) -> bool:
    return "*" in allowed or origin in allowed


def cors_headers(origin: Optional[str], allowed: List[str]) -> Dict[str, str]:
    """Headers to attach to every response for a request from ``origin``."""
    headers = {
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": MAX_AGE_S,
    }

    if not allowed:
        # Permissive fallback when nothing is configured
        if origin:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        else:
            headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin_allowed(origin, allowed):
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"

    return headers
