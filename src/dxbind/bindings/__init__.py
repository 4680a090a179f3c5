"""Remote data-object handlers (records, files, gtables, jobs, applets, apps, projects)."""

from __future__ import annotations

from typing import Dict, Optional, Type

from ..context import DXContext
from ..exceptions import DXError
from ..links import dxlink, get_dxlink_ids, is_dxlink
from .dxapp import DXApp
from .dxapplet import DXApplet
from .dxdataobject import DXDataObject, EndpointRouter
from .dxfile import DXFile, new_dxfile
from .dxgtable import DXGTable, new_dxgtable
from .dxjob import DXJob
from .dxproject import DXProject
from .dxrecord import DXRecord, new_dxrecord

_HANDLERS_BY_PREFIX: Dict[str, Type[DXDataObject]] = {
    "record": DXRecord,
    "file": DXFile,
    "gtable": DXGTable,
    "job": DXJob,
    "applet": DXApplet,
    "app": DXApp,
    "project": DXProject,
    "container": DXProject,
}


def get_handler(
    dxid: str,
    project: Optional[str] = None,
    *,
    context: Optional[DXContext] = None,
) -> DXDataObject:
    """Return a handle of the right class for ``dxid``, judged by its ID prefix."""
    prefix = dxid.split("-", 1)[0] if "-" in dxid else ""
    try:
        cls = _HANDLERS_BY_PREFIX[prefix]
    except KeyError:
        raise DXError(f"Cannot determine the object class of {dxid!r}") from None
    return cls(dxid, project, context=context)


__all__ = [
    "DXApp",
    "DXApplet",
    "DXDataObject",
    "DXFile",
    "DXGTable",
    "DXJob",
    "DXProject",
    "DXRecord",
    "EndpointRouter",
    "dxlink",
    "get_dxlink_ids",
    "get_handler",
    "is_dxlink",
    "new_dxfile",
    "new_dxgtable",
    "new_dxrecord",
]
