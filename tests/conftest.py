"""
Pytest configuration for profiling tests

Provides fakes and fixtures shared across all test files
"""

import json

import pytest

from profiling.engine import ProfilingEngine
from profiling.errors import SignalUnavailableError
from profiling.storage.kv import InMemoryKeyValueStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeModel:
    """Generative model returning a canned response and recording prompts."""

    def __init__(self, domains=None, ready=True, fail=False, response=None):
        self.domains = domains if domains is not None else {
            "big_five_openness": {"score": 0.9, "confidence": 0.8, "evidence": "asks many questions"},
            "big_five_neuroticism": {"score": 0.2, "confidence": 0.6, "evidence": "calm tone"},
        }
        self.ready = ready
        self.fail = fail
        self.response = response
        self.prompts = []

    def is_ready(self) -> bool:
        return self.ready

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise SignalUnavailableError("model exploded")
        if self.response is not None:
            return self.response
        return "Here you go:\n" + json.dumps(self.domains)


class CrashingModel(FakeModel):
    """Generative model whose client raises a plain exception."""

    def __init__(self, error=None, crash_on_ready=False):
        super().__init__()
        self.error = error or ConnectionError("inference server reset")
        self.crash_on_ready = crash_on_ready

    def is_ready(self) -> bool:
        if self.crash_on_ready:
            raise self.error
        return True

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        raise self.error


class AxisProvider:
    """
    Tiny embedding provider: one axis per keyword.

    A text embeds to the count of each keyword it contains.
    """

    def __init__(self, keywords=("alpha", "beta", "gamma")):
        self.keywords = tuple(keywords)
        self.name = "axis-" + "-".join(self.keywords)
        self.calls = 0

    def embed(self, text):
        self.calls += 1
        words = text.lower().split()
        return [float(words.count(k)) for k in self.keywords]


class CrashingProvider(AxisProvider):
    """Embeds prototypes normally, then raises for every message after `healthy_calls`."""

    def __init__(self, healthy_calls=None, error=None):
        super().__init__()
        self.healthy_calls = healthy_calls
        self.error = error or RuntimeError("embedding backend died")

    def embed(self, text):
        if self.healthy_calls is not None and self.calls >= self.healthy_calls:
            self.calls += 1
            raise self.error
        return super().embed(text)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def axis_provider():
    return AxisProvider()


@pytest.fixture
def memory_kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def engine_config():
    """Config for a deterministic, foreground engine."""
    return {
        "embedding": {"provider": "hash", "dim": 64},
        "deep_analysis": {"batch_size": 3, "batch_timeout_seconds": 60, "background": False},
        "storage": {"backend": "memory", "flush_interval_seconds": 60},
    }


@pytest.fixture
def engine(engine_config, memory_kv, fake_model, clock):
    eng = ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=fake_model, clock=clock)
    eng.init(start_background=False)
    yield eng
    eng.close()
