from __future__ import annotations

from typing import Optional


class DeepGuardError(Exception):
    """Base exception for all DeepGuard errors."""

    code: str = "INTERNAL_ERROR"


class UnauthorizedError(DeepGuardError):
    """No resolvable caller identity."""

    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ConfigurationError(DeepGuardError):
    """A required setting (provider key, JWT secret) is missing."""

    code = "CONFIG_ERROR"


class ProviderFailure(DeepGuardError):
    """Detection provider returned non-2xx or could not be reached.

    Always recovered by the fallback path, never surfaced to the caller.
    """

    code = "PROVIDER_FAILURE"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
