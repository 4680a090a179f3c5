from __future__ import annotations

from typing import Any, Dict, Optional

from ..exceptions import DXInvalidStateError
from .dxdataobject import DXDataObject, EndpointRouter


class DXProject(DXDataObject):
    """Handle for a project.

    A project is its own container, so the object ID and the project ID of
    the handle are always the same.  Moving, removing or cloning a project
    as if it were an object inside a project is not supported; use
    :meth:`destroy` to delete it.  Projects have no types, details, name or
    close step either; those calls fail locally with DXInvalidStateError.
    """

    _router = EndpointRouter(
        "project",
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

    def set_ids(self, dxid: str, project: Optional[str] = None) -> None:
        self._dxid = dxid
        self._proj = dxid

    def new(
        self,
        name: str,
        summary: Optional[str] = None,
        description: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        payload: Dict[str, Any] = {"name": name}
        if summary is not None:
            payload["summary"] = summary
        if description is not None:
            payload["description"] = description
        payload.update(kwargs)
        self._new(payload)

    def new_folder(self, folder: str, parents: bool = False) -> None:
        self._ensure_attached()
        payload = {"folder": folder, "parents": parents}
        self._router.invoke(self._api, self._dxid, "newFolder", payload)

    def list_folder(self, folder: str = "/") -> Dict[str, Any]:
        """Return ``{"objects": [...], "folders": [...]}`` for ``folder``."""
        self._ensure_attached()
        return self._router.invoke(self._api, self._dxid, "listFolder", {"folder": folder})

    def destroy(self, terminate_jobs: bool = False) -> None:
        """Delete the project; the handle is detached afterwards."""
        self._ensure_attached()
        self._router.invoke(self._api, self._dxid, "destroy", {"terminateJobs": terminate_jobs})
        self._dxid = None
        self._proj = None

    def move(self, destination: str) -> None:
        raise DXInvalidStateError("Projects cannot be moved into folders")

    def remove(self) -> None:
        raise DXInvalidStateError("Use DXProject.destroy() to delete a project")

    def clone(self, dest_project: str, dest_folder: str = "/") -> DXDataObject:
        raise DXInvalidStateError("Projects cannot be cloned into other projects")
