from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .exceptions import DXError

LINK_KEY = "$dnanexus_link"


def dxlink(dxid: str, project: Optional[str] = None) -> Dict[str, Any]:
    """Return a link to ``dxid`` suitable for embedding in details or inputs.

    The ``project`` key is only present when a non-empty project is given.
    """
    link: Dict[str, Any] = {"id": dxid}
    if project:
        link["project"] = project
    return {LINK_KEY: link}


def is_dxlink(value: Any) -> bool:
    if not isinstance(value, dict) or set(value) != {LINK_KEY}:
        return False
    inner = value[LINK_KEY]
    # Legacy links are a bare ID string
    return isinstance(inner, str) or (isinstance(inner, dict) and "id" in inner)


def get_dxlink_ids(link: Any) -> Tuple[str, Optional[str]]:
    """Return ``(object_id, project_id_or_None)`` for a link."""
    if not is_dxlink(link):
        raise DXError(f"Not a DNAnexus link: {link!r}")
    inner = link[LINK_KEY]
    if isinstance(inner, str):
        return inner, None
    return inner["id"], inner.get("project")
