"""
Shared test fixtures for the Google MCP test suite.

Key fixtures:
- clean_env: Removes GOOGLE_MCP_* variables so the developer's own
  configuration cannot leak into tests (autouse)
- make_settings: A factory building PolicySettings from keyword arguments only
- make_policy: A factory building a PolicyConfig through the real loader

Testing approach:
- test_policy.py: Unit tests for the loader and the scope composer.
- test_tools.py: Unit tests for the tool registry and is_tool_allowed().
- test_server.py: Integration tests for the PolicyMiddleware through the
  MCP protocol (in-memory ASGI app, no network needed).
- test_show_policy.py: The operator CLI.
"""

import os

import pytest

from google_mcp.config import PolicySettings
from google_mcp.policy import load_policy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from GOOGLE_MCP_* variables and any .env file."""
    for key in list(os.environ):
        if key.upper().startswith("GOOGLE_MCP_"):
            monkeypatch.delenv(key)
    # PolicySettings() reads .env from the working directory.
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_settings():
    """
    Factory fixture returning PolicySettings built from explicit values.

    Usage in tests:
        def test_something(make_settings):
            settings = make_settings(scope_profile="full", services="all")
    """

    def _make_settings(**kwargs) -> PolicySettings:
        return PolicySettings(_env_file=None, **kwargs)

    return _make_settings


@pytest.fixture
def make_policy(make_settings):
    """
    Factory fixture returning a PolicyConfig parsed from raw setting values.

    Usage in tests:
        def test_something(make_policy):
            policy = make_policy(scope_profile="readonly", services="gmail")
    """

    def _make_policy(**kwargs):
        return load_policy(make_settings(**kwargs))

    return _make_policy
