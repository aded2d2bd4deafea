# /models.py
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel

from errors import ClientInputError


# ----------------------------
# Closed style enums
# ----------------------------

class Mode(str, Enum):
    OPS_BRIEF = "OPS_BRIEF"
    EPISODE_OUTLINE = "EPISODE_OUTLINE"
    POST_KIT = "POST_KIT"


class Tone(str, Enum):
    CINEMATIC = "CINEMATIC"
    SERIOUS = "SERIOUS"
    UNHINGED = "UNHINGED"


DEFAULT_MODE = Mode.OPS_BRIEF
DEFAULT_TONE = Tone.CINEMATIC

E = TypeVar("E", Mode, Tone)


def parse_with_default(enum_cls: Type[E], value: Any, default: E) -> E:
    """Match ``value`` case-insensitively; anything unknown maps to ``default``."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return default
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        return default


def parse_mode(value: Any) -> Mode:
    return parse_with_default(Mode, value, DEFAULT_MODE)


def parse_tone(value: Any) -> Tone:
    return parse_with_default(Tone, value, DEFAULT_TONE)


def _body_text(body: Dict[str, Any], field: str) -> str:
    # null, false, 0 and "" all mean "not provided"
    value = body.get(field)
    if value is None or value is False or value == 0 or value == "":
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ClientInputError(f"'{field}' must be a string.")
    return str(value).strip()


# ----------------------------
# Data models
# ----------------------------

class TerminalRequest(BaseModel):
    text: str
    mode: Mode = DEFAULT_MODE
    tone: Tone = DEFAULT_TONE
    persona_override: Optional[str] = None

    @classmethod
    def from_payload(cls, body: Dict[str, Any], max_chars: int) -> "TerminalRequest":
        """Validate a decoded POST body. Raises ClientInputError on bad ``text`` or ``persona``."""
        text = _body_text(body, "text")
        if not text:
            raise ClientInputError("Missing 'text'.")
        if len(text) > max_chars:
            raise ClientInputError(f"Text too long (max {max_chars} chars).")

        persona = _body_text(body, "persona")

        return cls(
            text=text,
            mode=parse_mode(body.get("mode")),
            tone=parse_tone(body.get("tone")),
            persona_override=persona or None,
        )


class PromptBundle(BaseModel):
    persona: str
    tone_rules: str
    format_template: str
    user_block: str

    @property
    def instructions(self) -> str:
        return f"{self.persona}\n\n{self.tone_rules}\n\n{self.format_template}"


class UpstreamResponse(BaseModel):
    ok: bool
    status: int
    text: str = ""
    raw_body: Any = None


class RateLimitRecord(BaseModel):
    window_start: float
    count: int = 0


class RateLimitDecision(BaseModel):
    allowed: bool
    remaining: int = 0
    retry_after_seconds: int = 0
