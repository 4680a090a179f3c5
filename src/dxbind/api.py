from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .exceptions import DXAPIError, DXError, DXRequestError, MissingCredentialsError

_logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Status codes worth another attempt before giving up on a call
_RETRYABLE_STATUS = (429, 500, 502, 503, 504)

# Calls that create or start something; not repeated after a 5xx or read timeout
_NON_IDEMPOTENT_METHODS = frozenset({"new", "run", "clone"})


def _parse_security_context(raw: Optional[str]) -> Dict[str, Optional[str]]:
    if not raw:
        return {"auth_token": None, "auth_token_type": None}
    try:
        ctx = json.loads(raw)
    except ValueError as e:
        raise DXError(f"DX_SECURITY_CONTEXT is not valid JSON: {e}") from e
    if not isinstance(ctx, dict):
        raise DXError("DX_SECURITY_CONTEXT must be a JSON object")
    return {
        "auth_token": ctx.get("auth_token"),
        "auth_token_type": ctx.get("auth_token_type"),
    }


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class DXConfig:
    """Configuration for reaching the DNAnexus API server."""

    apiserver_protocol: str = "https"
    apiserver_host: str = "api.dnanexus.com"
    apiserver_port: int = 443

    auth_token: Optional[str] = None
    auth_token_type: str = "Bearer"

    # Default project context for handles created without an explicit project
    workspace_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> DXConfig:
        """Load configuration from environment variables."""
        security = _parse_security_context(os.getenv("DX_SECURITY_CONTEXT"))
        return cls(
            apiserver_protocol=os.getenv("DX_APISERVER_PROTOCOL", "https"),
            apiserver_host=os.getenv("DX_APISERVER_HOST", "api.dnanexus.com"),
            apiserver_port=int(os.getenv("DX_APISERVER_PORT", "443")),
            auth_token=security["auth_token"],
            auth_token_type=security["auth_token_type"] or "Bearer",
            workspace_id=os.getenv("DX_WORKSPACE_ID") or os.getenv("DX_PROJECT_CONTEXT_ID"),
        )

    @property
    def apiserver_url(self) -> str:
        proto = self.apiserver_protocol.rstrip(":/")
        host = self.apiserver_host.rstrip("/")
        if _DEFAULT_PORTS.get(proto) == int(self.apiserver_port):
            return f"{proto}://{host}"
        return f"{proto}://{host}:{self.apiserver_port}"


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class DXHTTPClient:
    """Minimal DNAnexus API client: every call is a JSON POST to /{resource}/{method}."""

    def __init__(self, cfg: Optional[DXConfig] = None) -> None:
        self.cfg = cfg or DXConfig.from_env()
        self.session = requests.Session()

    # --------------------------- Public methods -----------------------

    def invoke(self, resource: str, method: str, payload: Any = None) -> Any:
        """POST ``payload`` to ``/{resource}/{method}`` and return the decoded response.

        ``resource`` is an object ID (``record-xxxx``), a project ID, or a class
        name for class-level routes such as ``record/new``.
        """
        url = f"{self.cfg.apiserver_url}/{resource}/{method}"
        _logger.debug("Invoking %s/%s", resource, method)
        r = self._request(
            "POST",
            url,
            json=payload if payload is not None else {},
            idempotent=method not in _NON_IDEMPOTENT_METHODS,
        )
        try:
            return r.json()
        except ValueError as e:
            raise DXRequestError(f"{url} returned invalid JSON") from e

    def whoami(self) -> str:
        """Return the ID of the user the security token belongs to."""
        return self.invoke("system", "whoami")["id"]

    # --------------------------- Internal helpers --------------------

    def _auth_headers(self) -> Dict[str, str]:
        if not self.cfg.auth_token:
            raise MissingCredentialsError(["DX_SECURITY_CONTEXT"])
        return {"Authorization": f"{self.cfg.auth_token_type} {self.cfg.auth_token}"}

    def _request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        auth_required: bool = True,
        idempotent: bool = True,
        retries: int = 3,
        backoff: float = 0.8,
        timeout: float = 30.0,
    ) -> requests.Response:
        """Generic request with retry and logging.

        Connection errors and 429 answers are always retried.  Read timeouts
        and 5xx answers are retried only when ``idempotent`` is true.
        """
        headers: Dict[str, str] = {}
        if auth_required:
            headers.update(self._auth_headers())

        for attempt in range(1, retries + 1):
            try:
                r = self.session.request(
                    method,
                    url,
                    json=json,
                    headers=headers,
                    timeout=timeout,
                )
            except requests.RequestException as e:
                _logger.warning("Request error (attempt %d/%d): %s", attempt, retries, e)
                retryable = idempotent or isinstance(e, requests.ConnectionError)
                if attempt == retries or not retryable:
                    raise DXRequestError(f"{method} {url} failed: {e}") from e
                time.sleep(backoff * attempt)
                continue

            if r.status_code < 400:
                return r

            retryable = r.status_code == 429 or (idempotent and r.status_code in _RETRYABLE_STATUS)
            if retryable and attempt < retries:
                _logger.warning("HTTP %s -> retrying %d/%d", r.status_code, attempt, retries)
                time.sleep(backoff * attempt)
                continue

            raise self._error_from_response(r, url)
        raise DXRequestError("Exceeded maximum retries.")

    def _error_from_response(self, r: requests.Response, url: str) -> DXAPIError:
        """Build a DXAPIError from the server's ``{"error": {...}}`` body."""
        try:
            body = r.json()
        except ValueError:
            body = None

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            name = error.get("type") or "HTTPError"
            msg = error.get("message") or ""
            details = error.get("details")
        else:
            name = "HTTPError"
            msg = r.text if isinstance(r.text, str) else ""
            details = None

        _logger.error("HTTP %s error for %s: %s: %s", r.status_code, url, name, msg)
        return DXAPIError(r.status_code, name, msg, details)
