from __future__ import annotations

from typing import Any, Optional

from ..context import DXContext
from .dxdataobject import DXDataObject, EndpointRouter, _creation_fields


class DXRecord(DXDataObject):
    """Handle for a record: a data object with only metadata and details."""

    _router = EndpointRouter("record")

    def new(self, project: Optional[str] = None, close: bool = False, **kwargs: Any) -> None:
        """Create a new record and attach this handle to it.

        Keyword arguments: name, types, tags, properties, details, folder,
        parents, hidden.
        """
        payload = _creation_fields(**kwargs)
        if close:
            payload["close"] = True
        self._new(payload, project=project)


def new_dxrecord(context: Optional[DXContext] = None, **kwargs: Any) -> DXRecord:
    """Create a record and return a handle to it."""
    handler = DXRecord(context=context)
    handler.new(**kwargs)
    return handler
