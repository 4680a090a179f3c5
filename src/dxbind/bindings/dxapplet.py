from __future__ import annotations

from typing import Any, Dict, Optional

from .dxdataobject import DXDataObject, EndpointRouter
from .dxjob import DXJob


class DXApplet(DXDataObject):
    """Handle for an applet: an executable stored as a data object in a project."""

    _router = EndpointRouter("applet")

    def new(self, project: Optional[str] = None, **spec: Any) -> None:
        """Create an applet from its full spec (runSpec, inputSpec, name, ...)."""
        self._new(dict(spec), project=project)

    def get(self) -> Dict[str, Any]:
        """Return the full applet spec, including runSpec and code."""
        self._ensure_attached()
        return self._router.invoke(self._api, self._dxid, "get", dict(self._project_fields()))

    def run(
        self,
        applet_input: Dict[str, Any],
        project: Optional[str] = None,
        folder: Optional[str] = None,
        name: Optional[str] = None,
    ) -> DXJob:
        """Launch the applet and return a handle to the new job."""
        self._ensure_attached()
        payload: Dict[str, Any] = {"input": applet_input, "project": project or self._proj}
        if folder is not None:
            payload["folder"] = folder
        if name is not None:
            payload["name"] = name
        resp = self._router.invoke(self._api, self._dxid, "run", payload)
        return DXJob(resp["id"], payload["project"], context=self._context)
