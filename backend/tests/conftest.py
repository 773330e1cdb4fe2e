"""Shared test configuration and fixtures."""

import pytest

from api.router import limiter
from config import settings


@pytest.fixture(autouse=True)
def _offline(monkeypatch):
    """No Gemini key and no rate limits: every test runs offline and unthrottled."""
    monkeypatch.setattr(settings, "gemini_api_key", "")
    monkeypatch.setattr(limiter, "enabled", False)
