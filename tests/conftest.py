import itertools

import pytest

from dxbind.context import DXContext, set_default_context
from dxbind.exceptions import DXAPIError

WORKSPACE = "project-workspace0000000000000"


class FakeAPI:
    """
    In-memory stand-in for the API server.

    Implements just enough of the object routes for handles to be exercised
    end to end. Every call is recorded in ``calls`` as (resource, method, payload).
    Objects that are closed go through ``closing`` for ``close_after`` describes.
    """

    def __init__(self, close_after: int = 0):
        self.calls = []
        self.objects = {}
        self.close_after = close_after
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------
    def add_object(self, dxid, projects, state="open", name=None, types=None, details=None):
        self.objects[dxid] = {
            "class": dxid.split("-", 1)[0],
            "state": state,
            "types": list(types or []),
            "details": details if details is not None else {},
            "created": 1700000000000,
            "pending": 0,
            "extra": {},
            "projects": {
                p: {"name": name or dxid, "properties": {}, "tags": [], "hidden": False, "folder": "/"}
                for p in projects
            },
        }
        return self.objects[dxid]

    def methods_called(self):
        return [m for _, m, _ in self.calls]

    # ------------------------------------------------------------------
    # Collaborator interface
    # ------------------------------------------------------------------
    def invoke(self, resource, method, payload=None):
        self.calls.append((resource, method, payload))
        if method == "new":
            return self._new(resource, payload)
        handler = getattr(self, "_" + method, None)
        if handler is None:
            raise DXAPIError(400, "InvalidInput", f"Unsupported method {method}")
        return handler(resource, payload)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _obj(self, dxid):
        try:
            return self.objects[dxid]
        except KeyError:
            raise DXAPIError(404, "ResourceNotFound", f'"{dxid}" could not be found') from None

    def _copy(self, dxid, payload):
        obj = self._obj(dxid)
        project = (payload or {}).get("project") or next(iter(obj["projects"]), None)
        try:
            return obj["projects"][project]
        except KeyError:
            raise DXAPIError(
                404, "ResourceNotFound", f'"{dxid}" is not in project "{project}"'
            ) from None

    def _new(self, cls, payload):
        dxid = f"{cls}-{next(self._ids):024d}"
        proj = payload.get("project") or dxid
        obj = self.add_object(
            dxid,
            [proj],
            name=payload.get("name"),
            types=payload.get("types"),
            details=payload.get("details"),
        )
        if payload.get("close"):
            obj["state"] = "closed"
        return {"id": dxid}

    def _describe(self, dxid, payload):
        obj = self._obj(dxid)
        copy = self._copy(dxid, payload)
        if obj["state"] == "closing":
            if obj["pending"] <= 0:
                obj["state"] = "closed"
            else:
                obj["pending"] -= 1
        desc = {
            "id": dxid,
            "class": obj["class"],
            "types": list(obj["types"]),
            "created": obj["created"],
            "state": obj["state"],
            "name": copy["name"],
            "folder": copy["folder"],
            "hidden": copy["hidden"],
            "tags": list(copy["tags"]),
        }
        desc.update(obj["extra"])
        if payload.get("properties"):
            desc["properties"] = dict(copy["properties"])
        if payload.get("details"):
            desc["details"] = obj["details"]
        return desc

    def _addTypes(self, dxid, payload):
        obj = self._obj(dxid)
        obj["types"].extend(payload["types"])
        return {"id": dxid}

    def _removeTypes(self, dxid, payload):
        obj = self._obj(dxid)
        obj["types"] = [t for t in obj["types"] if t not in payload["types"]]
        return {"id": dxid}

    def _getDetails(self, dxid, payload):
        return self._obj(dxid)["details"]

    def _setDetails(self, dxid, payload):
        self._obj(dxid)["details"] = payload
        return {"id": dxid}

    def _setVisibility(self, dxid, payload):
        self._copy(dxid, payload)["hidden"] = payload["hidden"]
        return {"id": dxid}

    def _rename(self, dxid, payload):
        self._copy(dxid, payload)["name"] = payload["name"]
        return {"id": dxid}

    def _setProperties(self, dxid, payload):
        props = self._copy(dxid, payload)["properties"]
        for k, v in payload["properties"].items():
            if v is None:
                props.pop(k, None)
            else:
                props[k] = v
        return {"id": dxid}

    def _addTags(self, dxid, payload):
        self._copy(dxid, payload)["tags"].extend(payload["tags"])
        return {"id": dxid}

    def _removeTags(self, dxid, payload):
        copy = self._copy(dxid, payload)
        copy["tags"] = [t for t in copy["tags"] if t not in payload["tags"]]
        return {"id": dxid}

    def _close(self, dxid, payload):
        obj = self._obj(dxid)
        obj["state"] = "closing"
        obj["pending"] = self.close_after
        return {"id": dxid}

    def _listProjects(self, dxid, payload):
        return {p: "ADMINISTER" for p in self._obj(dxid)["projects"]}

    def _removeObjects(self, project, payload):
        for dxid in payload["objects"]:
            obj = self._obj(dxid)
            self._copy(dxid, {"project": project})
            del obj["projects"][project]
        return {"id": project}

    def _move(self, project, payload):
        for dxid in payload["objects"]:
            self._copy(dxid, {"project": project})["folder"] = payload["destination"]
        return {"id": project}

    def _clone(self, project, payload):
        for dxid in payload["objects"]:
            src = self._copy(dxid, {"project": project})
            self._obj(dxid)["projects"][payload["project"]] = dict(
                src,
                properties=dict(src["properties"]),
                tags=list(src["tags"]),
                folder=payload["destination"],
            )
        return {"id": project, "project": payload["project"], "exists": []}


@pytest.fixture
def fake_api():
    return FakeAPI()


@pytest.fixture
def ctx(fake_api):
    return DXContext(api=fake_api, workspace_id=WORKSPACE)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """
    Keep tests independent of the developer's DNAnexus environment.
    Clears DX_* variables and the cached default context around every test.
    """
    for var in (
        "DX_APISERVER_PROTOCOL",
        "DX_APISERVER_HOST",
        "DX_APISERVER_PORT",
        "DX_SECURITY_CONTEXT",
        "DX_WORKSPACE_ID",
        "DX_PROJECT_CONTEXT_ID",
    ):
        monkeypatch.delenv(var, raising=False)
    set_default_context(None)
    yield
    set_default_context(None)
