"""Python bindings for DNAnexus data objects."""

from .api import DXConfig, DXHTTPClient
from .bindings import (
    DXApp,
    DXApplet,
    DXDataObject,
    DXFile,
    DXGTable,
    DXJob,
    DXProject,
    DXRecord,
    get_handler,
    new_dxfile,
    new_dxgtable,
    new_dxrecord,
)
from .context import DXContext, get_default_context, set_default_context, set_workspace_id
from .exceptions import (
    DXAPIError,
    DXError,
    DXInvalidStateError,
    DXJobFailureError,
    DXRequestError,
    DXTimeoutError,
    MissingCredentialsError,
)
from .links import dxlink, get_dxlink_ids, is_dxlink
from .logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "DXAPIError",
    "DXApp",
    "DXApplet",
    "DXConfig",
    "DXContext",
    "DXDataObject",
    "DXError",
    "DXFile",
    "DXGTable",
    "DXHTTPClient",
    "DXInvalidStateError",
    "DXJob",
    "DXJobFailureError",
    "DXProject",
    "DXRecord",
    "DXRequestError",
    "DXTimeoutError",
    "MissingCredentialsError",
    "configure_logging",
    "dxlink",
    "get_default_context",
    "get_dxlink_ids",
    "get_handler",
    "is_dxlink",
    "new_dxfile",
    "new_dxgtable",
    "new_dxrecord",
    "set_default_context",
    "set_workspace_id",
]
