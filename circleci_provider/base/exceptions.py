"""
CircleCI provider exception hierarchy.

Every error raised by the provider inherits from :class:`CircleCIError`.
Client-side failures (transport, encoding, unexpected status codes) share
:class:`ClientError`; lifecycle policy failures (bad names, conflicts) are
raised by the resource adapter before or instead of any mutation.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class CircleCIError(Exception):
    """Root exception for all provider errors."""


# ── Resource policy ───────────────────────────────────────────────────
class ValidationError(CircleCIError):
    """A record failed local validation; no request was sent."""


class ConflictError(CircleCIError):
    """The environment variable already exists on the remote project."""

    def __init__(self, project: str, name: str) -> None:
        self.project = project
        self.name = name
        super().__init__(
            f"environment variable '{name}' already exists for project '{project}'"
        )


# ── API client ────────────────────────────────────────────────────────
class ClientError(CircleCIError):
    """Base exception for CircleCI API client operations."""


class TransportError(ClientError):
    """The request never got a response (DNS, TCP, TLS, timeout)."""


class EncodingError(ClientError):
    """A request body could not be serialized or a response body parsed."""


class UnexpectedStatusError(ClientError):
    """The API answered with a status code the operation does not accept."""

    def __init__(
        self,
        status_code: int,
        action: str,
        *,
        project: str | None = None,
        name: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.action = action
        self.project = project
        self.name = name
        super().__init__(
            f"circleci: wrong status code {status_code} {action} environment variable"
        )
