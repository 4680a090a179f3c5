"""Common handler contract for remote data objects.

Every handle carries two IDs: the ID of the data object, and the ID of the
project whose copy of the object it reads and annotates.  Two handles with the
same object ID and different project IDs reach the same underlying payload,
but name, properties, tags and visibility are local to each project.

What differs between classes (record, file, job, ...) is only *where* a call
is routed; that lives in an :class:`EndpointRouter` held by each handle class.
Payload shapes and error propagation are owned once, by :class:`DXDataObject`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional

from ..context import DXContext, get_default_context
from ..exceptions import DXInvalidStateError, DXTimeoutError

_logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Endpoint routing
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class EndpointRouter:
    """Maps handler hooks onto API routes for one object class.

    ``project_scoped`` is False for classes that live outside projects (apps,
    jobs, projects themselves); their payloads carry no ``"project"`` field.
    ``unsupported`` lists API methods the class does not have; calling one
    raises DXInvalidStateError locally instead of reaching the server.
    """

    class_name: str
    project_scoped: bool = True
    unsupported: FrozenSet[str] = frozenset()

    def invoke(self, api: Any, resource: str, api_method: str, payload: Any = None) -> Any:
        if api_method in self.unsupported:
            raise DXInvalidStateError(f"{self.class_name} objects do not support {api_method}")
        return api.invoke(resource, api_method, payload if payload is not None else {})

    def new(self, api: Any, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, self.class_name, "new", payload)

    # --- per-object hooks -------------------------------------------

    def describe(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "describe", payload)

    def add_types(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "addTypes", payload)

    def remove_types(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "removeTypes", payload)

    def get_details(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "getDetails", payload)

    def set_details(self, api: Any, dxid: str, payload: Any) -> Any:
        return self.invoke(api, dxid, "setDetails", payload)

    def set_visibility(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "setVisibility", payload)

    def rename(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "rename", payload)

    def set_properties(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "setProperties", payload)

    def add_tags(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "addTags", payload)

    def remove_tags(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "removeTags", payload)

    def close(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "close", payload)

    def list_projects(self, api: Any, dxid: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, dxid, "listProjects", payload)

    # --- container (project) routes ---------------------------------

    def move(self, api: Any, project: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, project, "move", payload)

    def remove_objects(self, api: Any, project: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, project, "removeObjects", payload)

    def clone(self, api: Any, project: str, payload: Dict[str, Any]) -> Any:
        return self.invoke(api, project, "clone", payload)


def _creation_fields(
    *,
    name: Optional[str] = None,
    types: Optional[Iterable[str]] = None,
    tags: Optional[Iterable[str]] = None,
    properties: Optional[Dict[str, str]] = None,
    details: Any = None,
    folder: Optional[str] = None,
    parents: bool = False,
    hidden: bool = False,
) -> Dict[str, Any]:
    """Build the fields shared by every ``/{class}/new`` call."""
    fields: Dict[str, Any] = {}
    if name is not None:
        fields["name"] = name
    if types is not None:
        fields["types"] = list(types)
    if tags is not None:
        fields["tags"] = list(tags)
    if properties is not None:
        fields["properties"] = dict(properties)
    if details is not None:
        fields["details"] = details
    if folder is not None:
        fields["folder"] = folder
        fields["parents"] = parents
    if hidden:
        fields["hidden"] = True
    return fields


# ----------------------------------------------------------------------
# Handle base class
# ----------------------------------------------------------------------
class DXDataObject:
    """Base class for all remote data-object handlers.

    Subclasses set ``_router`` to an :class:`EndpointRouter`; this class is
    not usable on its own.

    Construction never talks to the API server.  A handle built without an
    object ID is *unattached*: every remote operation on it raises
    :class:`~dxbind.exceptions.DXInvalidStateError` until :meth:`set_ids` is
    called (or a subclass ``new()`` creates the remote object).  Without an
    explicit project, the handle uses the context's workspace ID as read at
    construction, whether or not an object ID is given yet.

    Distinct handles may be used from different threads at the same time.
    Calling :meth:`set_ids` on a handle while another thread is using it
    needs external synchronization.
    """

    _router: Optional[EndpointRouter] = None

    def __init__(
        self,
        dxid: Optional[str] = None,
        project: Optional[str] = None,
        *,
        context: Optional[DXContext] = None,
    ) -> None:
        if self._router is None:
            raise TypeError(f"{type(self).__name__} does not define an endpoint router")
        self._context = context or get_default_context()
        self._dxid: Optional[str] = None
        self._proj: Optional[str] = project if project is not None else self._context.workspace_id
        if dxid is not None:
            self.set_ids(dxid, project)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._dxid} project={self._proj}>"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self._dxid, self._proj) == (other._dxid, other._proj)  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    # --------------------------- Identity -----------------------------

    def set_ids(self, dxid: str, project: Optional[str] = None) -> None:
        """Point the handle at ``dxid`` as seen through ``project``.

        When ``project`` is omitted, the context's current workspace ID is used.
        No remote validation happens here.
        """
        self._dxid = dxid
        self._proj = project if project is not None else self._context.workspace_id

    def get_id(self) -> Optional[str]:
        return self._dxid

    def get_proj_id(self) -> Optional[str]:
        return self._proj

    @property
    def context(self) -> DXContext:
        return self._context

    @property
    def _api(self) -> Any:
        return self._context.api

    def _ensure_attached(self, need_project: Optional[bool] = None) -> None:
        if need_project is None:
            need_project = self._router.project_scoped
        if not self._dxid:
            raise DXInvalidStateError(
                f"{type(self).__name__} handle is not associated with an object ID"
            )
        if need_project and not self._proj:
            raise DXInvalidStateError(
                f"{type(self).__name__} handle for {self._dxid} has no project ID"
            )

    def _project_fields(self) -> Dict[str, Any]:
        return {"project": self._proj} if self._router.project_scoped else {}

    def _new(self, payload: Dict[str, Any], project: Optional[str] = None) -> None:
        """Create the remote object via ``/{class}/new`` and attach this handle to it."""
        proj = project or self._proj or self._context.workspace_id
        if self._router.project_scoped:
            if not proj:
                raise DXInvalidStateError(
                    f"No project given to create a {self._router.class_name} in"
                )
            payload = dict(payload, project=proj)
        resp = self._router.new(self._api, payload)
        self.set_ids(resp["id"], proj)
        _logger.debug("Created %s in %s", resp["id"], proj)

    # --------------------------- Describe -----------------------------

    def describe(self, incl_properties: bool = False, incl_details: bool = False) -> Dict[str, Any]:
        """Return the object's description.

        The result contains at least ``id``, ``class``, ``types`` and
        ``created``; other fields depend on the class.  Never cached.
        """
        self._ensure_attached()
        payload = dict(self._project_fields())
        payload["properties"] = incl_properties
        payload["details"] = incl_details
        return self._router.describe(self._api, self._dxid, payload)

    # --------------------------- Types --------------------------------

    def add_types(self, types: Iterable[str]) -> None:
        self._ensure_attached()
        self._router.add_types(self._api, self._dxid, {"types": list(types)})

    def remove_types(self, types: Iterable[str]) -> None:
        self._ensure_attached()
        self._router.remove_types(self._api, self._dxid, {"types": list(types)})

    # --------------------------- Details ------------------------------

    def get_details(self) -> Any:
        self._ensure_attached()
        return self._router.get_details(self._api, self._dxid, {})

    def set_details(self, details: Any) -> None:
        """Replace the object's details with ``details`` (a JSON object or array)."""
        self._ensure_attached()
        self._router.set_details(self._api, self._dxid, details)

    # --------------------------- Visibility & name --------------------

    def hide(self) -> None:
        """Hide the object in this handle's project; other copies keep their visibility."""
        self._ensure_attached()
        payload = dict(self._project_fields(), hidden=True)
        self._router.set_visibility(self._api, self._dxid, payload)

    def unhide(self) -> None:
        self._ensure_attached()
        payload = dict(self._project_fields(), hidden=False)
        self._router.set_visibility(self._api, self._dxid, payload)

    def rename(self, name: str) -> None:
        """Rename the object in this handle's project only."""
        self._ensure_attached()
        payload = dict(self._project_fields(), name=name)
        self._router.rename(self._api, self._dxid, payload)

    # --------------------------- Properties & tags --------------------

    def set_properties(self, properties: Dict[str, Optional[str]]) -> None:
        """Set the given properties; keys not mentioned are left alone.

        A value of ``None`` asks the server to remove that property.
        """
        self._ensure_attached()
        payload = dict(self._project_fields(), properties=dict(properties))
        self._router.set_properties(self._api, self._dxid, payload)

    def get_properties(self) -> Dict[str, str]:
        return self.describe(incl_properties=True)["properties"]

    def add_tags(self, tags: Iterable[str]) -> None:
        self._ensure_attached()
        payload = dict(self._project_fields(), tags=list(tags))
        self._router.add_tags(self._api, self._dxid, payload)

    def remove_tags(self, tags: Iterable[str]) -> None:
        self._ensure_attached()
        payload = dict(self._project_fields(), tags=list(tags))
        self._router.remove_tags(self._api, self._dxid, payload)

    # --------------------------- Lifecycle ----------------------------

    def close(self) -> None:
        """Ask the server to finalize the object; finalization may be asynchronous."""
        self._ensure_attached()
        self._router.close(self._api, self._dxid, {})

    def list_projects(self) -> List[str]:
        """Return the IDs of all projects holding a copy of the object (unordered)."""
        self._ensure_attached()
        resp = self._router.list_projects(self._api, self._dxid, {})
        # The server answers with {project_id: permission_level}
        return list(resp)

    def move(self, destination: str) -> None:
        """Move the object to ``destination`` folder within the same project."""
        self._ensure_attached(need_project=True)
        payload = {"objects": [self._dxid], "destination": destination}
        self._router.move(self._api, self._proj, payload)

    def remove(self) -> None:
        """Remove this project's copy of the object; copies elsewhere are untouched.

        On success the handle is detached from the object: its object ID is
        cleared, so any further remote operation raises DXInvalidStateError.
        """
        self._ensure_attached(need_project=True)
        self._router.remove_objects(self._api, self._proj, {"objects": [self._dxid]})
        _logger.debug("Removed %s from %s", self._dxid, self._proj)
        self._dxid = None

    def _clone(self, dest_project: str, dest_folder: str = "/") -> Dict[str, Any]:
        self._ensure_attached(need_project=True)
        payload = {
            "objects": [self._dxid],
            "project": dest_project,
            "destination": dest_folder,
        }
        return self._router.clone(self._api, self._proj, payload)

    def clone(self, dest_project: str, dest_folder: str = "/") -> DXDataObject:
        """Clone the object into another project and return a handle to the new copy."""
        self._clone(dest_project, dest_folder)
        return type(self)(self._dxid, dest_project, context=self._context)

    # --------------------------- Waiting ------------------------------

    def _check_poll(self, desc: Dict[str, Any]) -> None:
        """Hook run on every poll that did not reach the awaited state."""

    def wait_on_state(
        self,
        state: str = "closed",
        timeout: Optional[float] = None,
        *,
        poll_interval: float = 2.0,
        max_poll_interval: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Block until the object's ``state`` equals ``state``.

        Polls ``describe`` with a growing interval.  ``timeout`` is in
        seconds (None waits forever); once it has elapsed without reaching
        the state, DXTimeoutError is raised.  A failing poll is raised
        immediately.
        """
        self._ensure_attached()
        deadline = None
        if timeout is not None:
            timeout = max(0.0, float(timeout))
            deadline = clock() + timeout

        interval = poll_interval
        while True:
            desc = self.describe()
            current = desc.get("state")
            _logger.debug("%s is %s (waiting for %s)", self._dxid, current, state)
            if current == state:
                _logger.info("%s reached state %s", self._dxid, state)
                return
            self._check_poll(desc)

            if deadline is not None:
                remaining = deadline - clock()
                if remaining <= 0:
                    raise DXTimeoutError(state, current, timeout)
                sleep(min(interval, remaining))
            else:
                sleep(interval)
            interval = min(interval * 1.5, max_poll_interval)
