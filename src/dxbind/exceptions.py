from __future__ import annotations

from typing import Any, Optional


class DXError(Exception):
    """Base class for every error raised by dxbind."""


class DXInvalidStateError(DXError):
    """Raised when a handle cannot perform an operation.

    Either the handle is not attached to a remote object yet, or its class
    does not support the requested call.
    """


class DXRequestError(DXError):
    """Raised when a remote invocation could not be completed."""


class DXAPIError(DXRequestError):
    """Raised when the API server answers with an error payload."""

    def __init__(
        self,
        status_code: int,
        name: str,
        msg: str,
        details: Optional[Any] = None,
    ):
        self.status_code = status_code
        self.name = name
        self.msg = msg
        self.details = details
        super().__init__(f"{name}: {msg}, code {status_code}")


class DXTimeoutError(DXError):
    """Raised when an object does not reach the awaited state in time."""

    def __init__(self, state: str, last_state: Optional[str], timeout: float):
        self.state = state
        self.last_state = last_state
        self.timeout = timeout
        super().__init__(
            f"Timed out after {timeout}s waiting for state {state!r} (last seen: {last_state!r})"
        )


class DXJobFailureError(DXError):
    """Raised when a job ends in a failure state while being waited on."""

    def __init__(self, job_id: str, state: str, reason: Optional[str] = None):
        self.job_id = job_id
        self.state = state
        self.reason = reason
        msg = f"{job_id} is {state}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class MissingCredentialsError(DXError, RuntimeError):
    """Raised when the required DNAnexus env vars are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))
