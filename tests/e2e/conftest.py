"""
E2E test configuration.

These tests use a REAL DNAnexus API server - no FakeAPI.
"""

import os

import pytest

from dxbind.context import DXContext, set_default_context


@pytest.fixture(autouse=True)
def isolated_environment():
    """
    Override the global isolated_environment fixture from tests/conftest.py.

    E2E tests need the developer's DX_* variables, so they are left alone.
    """
    set_default_context(None)
    yield
    set_default_context(None)


@pytest.fixture(scope="session")
def live_context():
    """Context for the real server; skips when credentials are missing."""
    ctx = DXContext.from_env()

    missing = [v for v in ("DX_SECURITY_CONTEXT", "DX_WORKSPACE_ID") if not os.environ.get(v)]
    if missing:
        pytest.skip(f"Missing credentials: {', '.join(missing)}")
    return ctx
