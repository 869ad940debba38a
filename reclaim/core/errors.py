"""Structured error types for RECLAIM.

Hierarchy::

    ReclaimError (Exception)
    +-- GatewayError        — a recovery service call failed (HTTP status or transport)
    +-- ConfigurationError  — invalid preferences or CLI combination
    +-- StoreError          — the local keyed store could not be read or written
"""

from __future__ import annotations

from typing import Any


class ReclaimError(Exception):
    """Base class for all RECLAIM errors."""


class GatewayError(ReclaimError):
    """A recovery service call failed.

    ``status`` is the HTTP status code, or ``None`` when the request never
    produced a response (DNS failure, refused connection, timeout).
    ``payload`` is the decoded JSON error body when the server sent one.
    """

    def __init__(
        self,
        status: int | None,
        payload: dict[str, Any] | None = None,
        detail: str = "",
    ) -> None:
        self.status = status
        self.payload = payload or {}
        self.detail = detail or str(self.payload.get("error") or self.payload.get("message") or "")
        label = "transport failure" if status is None else f"HTTP {status}"
        super().__init__(f"{label}: {self.detail}" if self.detail else label)

    @property
    def is_transport_failure(self) -> bool:
        return self.status is None


class ConfigurationError(ReclaimError, ValueError):
    """Preferences or command-line options are invalid."""


class StoreError(ReclaimError, OSError):
    """The local keyed store is unreadable or could not be written."""
