"""Custom exception hierarchy for solaroracle."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solaroracle.models.location import LocationKey


class SolarOracleError(Exception):
    """Base exception for all solaroracle errors."""


class OracleConfigError(SolarOracleError):
    """Invalid or missing configuration."""


class RegistryError(SolarOracleError):
    """A registry call was rejected.

    Every registry rejection is terminal for that call: no state change
    and no notification survive it.
    """

    def __init__(self, message: str, *, owner: str = "") -> None:
        self.owner = owner
        super().__init__(message)


class AlreadyInitialized(RegistryError):
    """A registry already exists for this owner identity."""


class NotInitialized(RegistryError):
    """No registry exists for this owner identity."""


class NotAuthorized(RegistryError):
    """The caller is not the registry owner."""

    def __init__(self, message: str, *, owner: str = "", caller: str = "") -> None:
        self.caller = caller
        super().__init__(message, owner=owner)


class LocationNotFound(RegistryError):
    """No measurement is stored for the requested location."""

    def __init__(self, message: str, *, owner: str = "", key: LocationKey | None = None) -> None:
        self.key = key
        super().__init__(message, owner=owner)


class StaleOrFutureData(RegistryError):
    """The submitted observation time lies in the future.

    Despite the name, only *future* timestamps are rejected. Arbitrarily old
    timestamps are accepted and overwrite newer ones.
    """

    def __init__(self, message: str, *, owner: str = "", observed_at: int = 0, now: int = 0) -> None:
        self.observed_at = observed_at
        self.now = now
        super().__init__(message, owner=owner)


class NrelTransportError(SolarOracleError):
    """HTTP-level failure talking to NREL (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class NrelApiError(SolarOracleError):
    """NREL answered but the payload carries errors or lacks outputs."""

    def __init__(self, message: str, *, endpoint: str = "", errors: list[str] | None = None) -> None:
        self.endpoint = endpoint
        self.errors = errors or []
        super().__init__(message)
