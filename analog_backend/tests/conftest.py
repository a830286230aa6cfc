import os
import sys
from types import SimpleNamespace

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

# Tests share one app instance; keep the general limit out of the way
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["AI_RATE_LIMIT_PER_MINUTE"] = "100000"


class FakeMessages:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


class FakeAnthropic:
    def __init__(self, text=None, error=None):
        self.messages = FakeMessages(text=text, error=error)


@pytest.fixture
def fake_ai(monkeypatch):
    """Install a fake Anthropic client answering with a fixed note."""
    from analog_backend.ai import insights

    fake = FakeAnthropic(text="## Notes\nA fifth-order ladder rolls off at 100 dB/decade.")
    monkeypatch.setattr(insights, "client", fake)
    return fake


@pytest.fixture
def no_ai(monkeypatch):
    """No client and no API key: every insight call must fall back."""
    from analog_backend.ai import insights

    monkeypatch.setattr(insights, "client", None)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


@pytest.fixture
def make_ai():
    """Factory for fake clients: make_ai(text=...) or make_ai(error=...)."""
    return FakeAnthropic
