"""Exception taxonomy shared by the resolution layer and the adapters."""

from __future__ import annotations


class GushError(Exception):
    """Base class for every failure that aborts a gush invocation."""


class ConfigError(GushError):
    """A configuration file is unreadable or malformed."""


class DetectionFailed(GushError):
    """The provider could not be inferred from the git remote."""


class AdapterError(GushError):
    """An adapter handle failed registry validation."""


class UnknownAdapter(AdapterError):
    """The handle does not resolve to an instantiable class."""


class InvalidAdapter(AdapterError):
    """The class does not satisfy the Adapter contract."""


class AdapterBuildError(GushError):
    """The adapter for the selected provider cannot be constructed."""


class AuthError(GushError):
    """The provider rejected the configured credentials."""


class ProviderError(GushError):
    """A provider API call failed after authentication."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
