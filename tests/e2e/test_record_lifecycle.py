"""
End-to-end lifecycle of a record on a real project.

This test is NOT run in CI by default. To run manually:

    DX_E2E_TESTS=true pytest tests/e2e/ -v

Requirements:
    - DX_SECURITY_CONTEXT and DX_WORKSPACE_ID in a .env file or environment
    - CONTRIBUTE access to the workspace project
"""

from __future__ import annotations

import os

import pytest

from dxbind.bindings import DXRecord, new_dxrecord
from dxbind.exceptions import DXInvalidStateError

pytestmark = pytest.mark.skipif(
    os.environ.get("DX_E2E_TESTS", "").lower() not in ("1", "true", "yes"),
    reason="E2E tests disabled. Set DX_E2E_TESTS=true to run.",
)


class TestRecordLifecycle:
    """Create, annotate, close and remove a record."""

    def test_full_lifecycle(self, live_context):
        rec = new_dxrecord(context=live_context, name="dxbind-e2e", types=["dxbindTest"])
        try:
            rec.set_properties({"k": "v"})
            rec.add_tags(["e2e"])
            rec.rename("dxbind-e2e-renamed")
            rec.close()
            rec.wait_on_state("closed", timeout=120)

            desc = rec.describe(incl_properties=True)
            assert desc["name"] == "dxbind-e2e-renamed"
            assert desc["properties"]["k"] == "v"
            assert "e2e" in desc["tags"]
            assert rec.get_proj_id() in rec.list_projects()
        finally:
            if rec.get_id():
                rec.remove()

        assert rec.get_id() is None
        with pytest.raises(DXInvalidStateError):
            rec.describe()

    def test_same_object_other_handle(self, live_context):
        rec = new_dxrecord(context=live_context, name="dxbind-e2e-twin")
        try:
            twin = DXRecord(rec.get_id(), rec.get_proj_id(), context=live_context)
            assert twin.describe()["id"] == rec.get_id()
        finally:
            rec.remove()
