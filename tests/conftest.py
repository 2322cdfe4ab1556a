"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Make the package importable without installation
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from ozwell_proxy.config_loader import GatewaySettings
from ozwell_proxy.main import create_app
from ozwell_proxy.testing import FakeBackend

BACKEND_URL = "http://ozwell.test"
CREDENTIAL = "Bearer test-credential"


# =============================================================================
# Settings / Backend Fixtures
# =============================================================================


@pytest.fixture
def settings() -> GatewaySettings:
    """Settings pointing at the fake backend, with streaming delay disabled."""
    return GatewaySettings(
        backend_url=BACKEND_URL,
        backend_timeout=5.0,
        stream_chunk_delay=0.0,
    )


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(settings: GatewaySettings, fake_backend: FakeBackend):
    return create_app(settings, transport=fake_backend.transport())


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


def build_chat_request(content: str = "Hi", **overrides) -> dict:
    """Build a minimal chat completions body with one user message."""
    body: dict = {"messages": [{"role": "user", "content": content}]}
    body.update(overrides)
    return body


def auth_headers(credential: str = CREDENTIAL) -> dict[str, str]:
    return {"Authorization": credential}
