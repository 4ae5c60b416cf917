"""
Pytest fixtures for PolicyScan tests. Upstream engines are faked with
httpx.MockTransport (HTTP level) or FakeEngine (scanner level).
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from policyscan_agent.config import EngineSettings, Settings
from policyscan_agent.logger import configure_logging
from policyscan_agent.models import FortiGuardFragment, TalosFragment

TALOS_URL = "https://talos.test/v1/lookup"
FORTIGUARD_URL = "https://fortiguard.test/webfilter"


class FakeEngine:
    """Scanner-level stand-in: returns (or raises) a canned value per URL."""

    def __init__(self, name: str, display_name: str, responses: dict | None = None):
        self.name = name
        self.display_name = display_name
        self.responses = responses or {}
        self.calls: list[str] = []

    async def query(self, url: str):
        self.calls.append(url)
        value = self.responses.get(url)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture(autouse=True)
def default_logging():
    """Each test starts from INFO-level logging, whatever the host environment sets."""
    configure_logging()
    yield


@pytest.fixture
def settings() -> Settings:
    return Settings(
        talos=EngineSettings(TALOS_URL, "talos-key"),
        fortiguard=EngineSettings(FORTIGUARD_URL, ""),
    )


@pytest.fixture
def query_engine():
    """Run engine_cls(engine_settings).query(url) against a MockTransport handler."""

    def _run(engine_cls, engine_settings, handler, url="https://example.com"):
        async def _go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                return await engine_cls(engine_settings, client).query(url)

        return asyncio.run(_go())

    return _run


@pytest.fixture
def fake_engines():
    def _make(talos_responses: dict | None = None, fortiguard_responses: dict | None = None):
        return (
            FakeEngine("talos", "Talos", talos_responses),
            FakeEngine("fortiguard", "FortiGuard", fortiguard_responses),
        )

    return _make


def talos(category=None, score=None) -> TalosFragment:
    return TalosFragment(category=category, score=score, raw={"category": category, "score": score})


def forti(category=None, threat=None) -> FortiGuardFragment:
    return FortiGuardFragment(category=category, threat=threat, raw={"category": category, "threat": threat})
