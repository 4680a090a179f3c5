from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from ..context import DXContext
from .dxdataobject import DXDataObject, EndpointRouter, _creation_fields


class DXGTable(DXDataObject):
    """Handle for a GenomicTable; like files, closing finishes on the server side."""

    _router = EndpointRouter("gtable")

    def new(
        self,
        columns: Iterable[Dict[str, str]],
        indices: Optional[List[Dict[str, Any]]] = None,
        project: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Create a gtable with the given column descriptors ({"name": ..., "type": ...})."""
        payload = _creation_fields(**kwargs)
        payload["columns"] = list(columns)
        if indices is not None:
            payload["indices"] = indices
        self._new(payload, project=project)

    def close(
        self, block: bool = False, timeout: Optional[float] = None, **wait_kwargs: Any
    ) -> None:
        super().close()
        if block:
            self.wait_on_close(timeout, **wait_kwargs)

    def wait_on_close(self, timeout: Optional[float] = None, **wait_kwargs: Any) -> None:
        self.wait_on_state("closed", timeout, **wait_kwargs)


def new_dxgtable(
    columns: Iterable[Dict[str, str]], context: Optional[DXContext] = None, **kwargs: Any
) -> DXGTable:
    handler = DXGTable(context=context)
    handler.new(columns, **kwargs)
    return handler
