"""
Shared fixtures for the preview panel tests.
"""

import pytest

from preview_panel.config import Config
from preview_panel.panel import PreviewPanel
from preview_panel.sandbox import LoopbackBridge


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def preview_env(monkeypatch):
    """Deterministic environment for Config()."""
    monkeypatch.setenv("PREVIEW_DEFAULT_URL", "https://codesandbox.io/")
    monkeypatch.setenv("PREVIEW_LOG_CAPACITY", "1000")
    monkeypatch.setenv("PREVIEW_NAV_ACK_TIMEOUT", "5")
    monkeypatch.setenv("PREVIEW_SHOW_CONSOLE", "true")
    monkeypatch.setenv("PREVIEW_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("PREVIEW_NAV_CONFIRM_SAME_URL", "false")
    return monkeypatch


@pytest.fixture
def config(preview_env):
    return Config()


@pytest.fixture
def bridge():
    return LoopbackBridge()


@pytest.fixture
def panel(bridge, config, clock):
    panel = PreviewPanel(bridge, config=config, clock=clock)
    with panel.mounted():
        yield panel
