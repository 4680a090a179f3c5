from __future__ import annotations

from .dxdataobject import DXDataObject, EndpointRouter


class DXApp(DXDataObject):
    """Handle for an app.

    Apps are global rather than project-contained: calls carry no project
    field and a project ID is not required.  Only describe, tags and the
    app-specific calls are available; the other object calls fail locally.
    """

    _router = EndpointRouter(
        "app",
        project_scoped=False,
        unsupported=frozenset(
            {
                "addTypes",
                "removeTypes",
                "getDetails",
                "setDetails",
                "setVisibility",
                "rename",
                "setProperties",
                "close",
                "listProjects",
            }
        ),
    )

    def install(self) -> None:
        self._ensure_attached()
        self._router.invoke(self._api, self._dxid, "install", {})

    def uninstall(self) -> None:
        self._ensure_attached()
        self._router.invoke(self._api, self._dxid, "uninstall", {})
