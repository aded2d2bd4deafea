import os
import sys
from pathlib import Path

import limits.storage.memory
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("PROVIDER_API_KEY", "test-key")

from rate_limit import RateLimitStore  # noqa: E402
from utils import client_ip  # noqa: E402


class FakeClock:
    """Callable clock that also stands in for the ``time`` module read by limits."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def time(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(limits.storage.memory, "time", fake)
    return fake


def test_budget_exceeded_inside_window(clock):
    store = RateLimitStore(max_requests=3, window_s=60, clock=clock)

    remaining = [store.hit("1.2.3.4").remaining for _ in range(3)]
    assert remaining == [2, 1, 0]

    clock.now += 20.5
    denied = store.hit("1.2.3.4")
    assert not denied.allowed
    assert denied.retry_after_seconds == 40


def test_new_window_resets_counter(clock):
    store = RateLimitStore(max_requests=1, window_s=60, clock=clock)

    assert store.hit("ip").allowed
    assert not store.hit("ip").allowed
    assert store.get("ip").count == 2

    clock.now += 60
    decision = store.hit("ip")
    assert decision.allowed
    record = store.get("ip")
    assert record.count == 1
    assert record.window_start == clock.now


def test_keys_are_independent(clock):
    store = RateLimitStore(max_requests=1, window_s=60, clock=clock)
    assert store.hit("a").allowed
    assert store.hit("b").allowed
    assert not store.hit("a").allowed


def test_retry_after_is_at_least_one_second(clock):
    store = RateLimitStore(max_requests=1, window_s=60, clock=clock)
    store.hit("ip")
    clock.now += 59.999
    assert store.hit("ip").retry_after_seconds == 1


def test_unknown_key_has_no_record(clock):
    assert RateLimitStore(clock=clock).get("never-seen") is None


def test_client_ip_prefers_first_forwarded_hop():
    headers = {"x-forwarded-for": "203.0.113.9, 10.0.0.1"}
    assert client_ip(headers, "127.0.0.1") == "203.0.113.9"
    assert client_ip({}, "127.0.0.1") == "127.0.0.1"
    assert client_ip({"x-forwarded-for": " "}, None) == "unknown"
