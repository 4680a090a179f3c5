"""Explicit configuration threaded into every handle.

A :class:`DXContext` bundles the object used to invoke the API with the
default workspace (project) ID.  Handles take a ``context=`` argument; when
it is omitted they fall back to the process default context, which is built
lazily from the environment the first time it is needed.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from .api import DXConfig, DXHTTPClient
from .env_loader import load_env_files

_logger = logging.getLogger(__name__)


@dataclass
class DXContext:
    """API invoker plus default workspace ID.

    ``api`` is anything with an ``invoke(resource, method, payload)`` method;
    normally a :class:`~dxbind.api.DXHTTPClient`.
    """

    api: Any
    workspace_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> DXContext:
        """Build a context from DX_* environment variables (and a .env file, if any)."""
        load_env_files(quiet=True)
        cfg = DXConfig.from_env()
        _logger.debug(
            "Context from environment: apiserver=%s workspace=%s",
            cfg.apiserver_url,
            cfg.workspace_id,
        )
        return cls(api=DXHTTPClient(cfg), workspace_id=cfg.workspace_id)


_default_context: Optional[DXContext] = None
_default_lock = threading.Lock()


def get_default_context() -> DXContext:
    global _default_context
    with _default_lock:
        if _default_context is None:
            _default_context = DXContext.from_env()
        return _default_context


def set_default_context(ctx: Optional[DXContext]) -> None:
    """Replace the process default context.

    ``None`` drops the cached context; it is rebuilt from the environment on next use.
    """
    global _default_context
    with _default_lock:
        _default_context = ctx


def set_workspace_id(workspace_id: Optional[str]) -> None:
    """Change the workspace used by handles created later without an explicit project."""
    get_default_context().workspace_id = workspace_id
