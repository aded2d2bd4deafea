import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("PROVIDER_API_KEY", "test-key")

from config import load_settings  # noqa: E402

ENV_NAMES = [
    "PROVIDER_API_KEY", "OPENAI_API_KEY", "PROVIDER_MODEL", "OPENAI_MODEL", "PROVIDER_BASE_URL",
    "PROVIDER_TEMPERATURE", "PROVIDER_TIMEOUT_SECONDS", "MAX_OUTPUT_TOKENS", "ALLOWED_ORIGINS",
    "ALLOWED_ORIGIN", "PERSONA_OVERRIDE", "TERMINAL_PERSONA", "PROMPT_PACK", "MAX_INPUT_CHARS",
    "RATE_LIMIT_MAX_REQUESTS", "RATE_LIMIT_WINDOW_SECONDS", "LOG_LEVEL",
]


def clear_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    clear_env(monkeypatch)
    s = load_settings()
    assert s.provider_api_key == ""
    assert s.provider_model == "gpt-4.1-mini"
    assert s.allowed_origins == []
    assert s.max_input_chars == 4000
    assert s.max_output_tokens == 900
    assert s.rate_limit_max_requests == 10
    assert s.rate_limit_window_s == 60


def test_env_values_and_fallback_names(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("OPENAI_API_KEY", " sk-legacy ")
    monkeypatch.setenv("ALLOWED_ORIGIN", "https://a.test, ,https://b.test")
    monkeypatch.setenv("TERMINAL_PERSONA", "Legacy persona")
    monkeypatch.setenv("PROVIDER_BASE_URL", "https://proxy.test/v1/")
    monkeypatch.setenv("MAX_OUTPUT_TOKENS", "512")
    monkeypatch.setenv("PROVIDER_TEMPERATURE", "0")

    s = load_settings()
    assert s.provider_api_key == "sk-legacy"
    assert s.allowed_origins == ["https://a.test", "https://b.test"]
    assert s.persona_override == "Legacy persona"
    assert s.provider_base_url == "https://proxy.test/v1"
    assert s.max_output_tokens == 512
    assert s.provider_temperature == 0.0


def test_primary_names_win(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("PROVIDER_API_KEY", "sk-new")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-old")
    assert load_settings().provider_api_key == "sk-new"


def test_invalid_numbers_fall_back(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("MAX_INPUT_CHARS", "lots")
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "-3")
    s = load_settings()
    assert s.max_input_chars == 4000
    assert s.rate_limit_max_requests == 10
