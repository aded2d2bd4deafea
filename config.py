# config.py
# Environment-driven settings for the terminal relay.

import os
from typing import List, Optional

import structlog
from pydantic import BaseModel, Field

from utils import parse_allowed_origins

logger = structlog.get_logger("config")


class Settings(BaseModel):
    # Provider
    provider_api_key: str = ""
    provider_model: str = "gpt-4.1-mini"
    provider_base_url: str = "https://api.openai.com/v1"
    provider_temperature: float = 0.8
    provider_timeout_s: float = 60.0
    max_output_tokens: int = 900

    # Request shaping
    allowed_origins: List[str] = Field(default_factory=list)
    persona_override: str = ""
    prompt_pack: str = "psyopanime"
    max_input_chars: int = 4000

    # Best-effort rate limit (process-local)
    rate_limit_max_requests: int = 10
    rate_limit_window_s: int = 60

    log_level: str = "INFO"


def _env(*names: str) -> Optional[str]:
    """First non-blank value among ``names``."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _env_number(name: str, default, cast, minimum=1):
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Invalid numeric setting, using default", setting=name, default=default)
        return default
    if value < minimum:
        logger.warning("Out-of-range numeric setting, using default", setting=name, default=default)
        return default
    return value


def load_settings() -> Settings:
    """Read settings from the current environment (``.env`` is loaded by app.py)."""
    defaults = Settings()
    return Settings(
        provider_api_key=_env("PROVIDER_API_KEY", "OPENAI_API_KEY") or "",
        provider_model=_env("PROVIDER_MODEL", "OPENAI_MODEL") or defaults.provider_model,
        provider_base_url=(_env("PROVIDER_BASE_URL") or defaults.provider_base_url).rstrip("/"),
        provider_temperature=_env_number("PROVIDER_TEMPERATURE", defaults.provider_temperature, float, minimum=0),
        provider_timeout_s=_env_number("PROVIDER_TIMEOUT_SECONDS", defaults.provider_timeout_s, float),
        max_output_tokens=_env_number("MAX_OUTPUT_TOKENS", defaults.max_output_tokens, int),
        allowed_origins=parse_allowed_origins(_env("ALLOWED_ORIGINS", "ALLOWED_ORIGIN")),
        persona_override=_env("PERSONA_OVERRIDE", "TERMINAL_PERSONA") or "",
        prompt_pack=_env("PROMPT_PACK") or defaults.prompt_pack,
        max_input_chars=_env_number("MAX_INPUT_CHARS", defaults.max_input_chars, int),
        rate_limit_max_requests=_env_number("RATE_LIMIT_MAX_REQUESTS", defaults.rate_limit_max_requests, int),
        rate_limit_window_s=_env_number("RATE_LIMIT_WINDOW_SECONDS", defaults.rate_limit_window_s, int),
        log_level=(_env("LOG_LEVEL") or defaults.log_level).upper(),
    )
