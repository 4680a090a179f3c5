from __future__ import annotations

from typing import Any, Optional

from ..context import DXContext
from .dxdataobject import DXDataObject, EndpointRouter, _creation_fields


class DXFile(DXDataObject):
    """Handle for a file object.

    Closing a file is asynchronous on the server (parts are assembled), so
    :meth:`close` can optionally block until the file reports ``closed``.
    """

    _router = EndpointRouter("file")

    def new(
        self, project: Optional[str] = None, media_type: Optional[str] = None, **kwargs: Any
    ) -> None:
        payload = _creation_fields(**kwargs)
        if media_type is not None:
            payload["media"] = media_type
        self._new(payload, project=project)

    def close(
        self, block: bool = False, timeout: Optional[float] = None, **wait_kwargs: Any
    ) -> None:
        super().close()
        if block:
            self.wait_on_close(timeout, **wait_kwargs)

    def wait_on_close(self, timeout: Optional[float] = None, **wait_kwargs: Any) -> None:
        self.wait_on_state("closed", timeout, **wait_kwargs)


def new_dxfile(context: Optional[DXContext] = None, **kwargs: Any) -> DXFile:
    handler = DXFile(context=context)
    handler.new(**kwargs)
    return handler
