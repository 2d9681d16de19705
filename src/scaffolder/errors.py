"""Error types raised by scaffolder actions."""

from __future__ import annotations


class ScaffolderError(Exception):
    """Base exception for scaffolder action errors.

    The action orchestrator records the stage that failed on ``stage``
    before re-raising, so callers can report where a publish stopped.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.stage: str | None = None


class InvalidInputError(ScaffolderError):
    """Action input is malformed (e.g. repo URL missing project or repo)."""

    pass


class ConfigurationError(ScaffolderError):
    """No usable integration configuration for the requested host."""

    pass


class AuthenticationError(ScaffolderError):
    """No token available to authenticate against the SCM server."""

    pass


class RemoteError(ScaffolderError):
    """The SCM server rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PushError(ScaffolderError):
    """Initializing or pushing the local workspace failed."""

    pass
