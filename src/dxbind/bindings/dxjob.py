from __future__ import annotations

from typing import Any, Dict, Optional

from ..exceptions import DXJobFailureError
from .dxdataobject import DXDataObject, EndpointRouter

FAILURE_STATES = ("failed", "terminated")


class DXJob(DXDataObject):
    """Handle for a job.

    Jobs are not contained in projects, so no project ID is required.  Jobs
    have no types, details, visibility, name or close step; those calls fail
    locally with DXInvalidStateError.
    """

    _router = EndpointRouter(
        "job",
        project_scoped=False,
        unsupported=frozenset(
            {
                "addTypes",
                "removeTypes",
                "getDetails",
                "setDetails",
                "setVisibility",
                "rename",
                "close",
                "listProjects",
            }
        ),
    )

    def terminate(self) -> None:
        self._ensure_attached()
        self._router.invoke(self._api, self._dxid, "terminate", {})

    def _check_poll(self, desc: Dict[str, Any]) -> None:
        state = desc.get("state")
        if state in FAILURE_STATES:
            raise DXJobFailureError(self._dxid, state, desc.get("failureReason"))

    def wait_on_done(self, timeout: Optional[float] = None, **wait_kwargs: Any) -> None:
        """Wait until the job is ``done``; raises DXJobFailureError if it fails first."""
        self.wait_on_state("done", timeout, **wait_kwargs)
