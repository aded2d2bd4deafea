"""Error taxonomy for the terminal relay.

Every layer raises one of these; ``app.py`` renders them as
``{"ok": false, "error": ...}`` at the handler boundary.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class TerminalError(Exception):
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Any = None,
        retry_after_seconds: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        self.retry_after_seconds = retry_after_seconds

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"ok": False, "error": self.message}
        if self.retry_after_seconds is not None:
            payload["retry_after_seconds"] = self.retry_after_seconds
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ClientInputError(TerminalError):
    status_code = 400


class MethodNotAllowed(TerminalError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class RateLimited(TerminalError):
    status_code = 429


class UpstreamThrottled(TerminalError):
    status_code = 429


class UpstreamError(TerminalError):
    status_code = 500


class ConfigurationError(TerminalError):
    status_code = 500


class TransportError(TerminalError):
    status_code = 500
