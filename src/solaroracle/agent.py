"""Oracle agent: moves NREL data into a registry.

One update cycle walks a list of locations, fetches each from NREL,
encodes it and submits it to the registry as the configured owner. A
failure on one location is logged and the cycle moves on.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from solaroracle._constants import scale_irradiance
from solaroracle._transport import SolarResourceFetcher
from solaroracle.config import OracleConfig
from solaroracle.exceptions import AlreadyInitialized, RegistryError, SolarOracleError
from solaroracle.models.location import LocationKey
from solaroracle.models.measurement import Measurement
from solaroracle.models.nrel import SolarResource
from solaroracle.registry.store import RegistryStore

_logger = logging.getLogger(__name__)


class Location(BaseModel):
    """A point to track, in signed decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    name: str = ""

    @property
    def key(self) -> LocationKey:
        return LocationKey.from_degrees(self.lat, self.lon)

    def __str__(self) -> str:
        label = f"{self.lat}, {self.lon}"
        return f"{self.name} ({label})" if self.name else label


# NREL's solar_resource endpoint only covers the United States.
DEFAULT_LOCATIONS: tuple[Location, ...] = (
    Location(lat=37.7749, lon=-122.4194, name="San Francisco, CA"),
    Location(lat=40.7128, lon=-74.0060, name="New York City, NY"),
    Location(lat=33.4484, lon=-112.0740, name="Phoenix, AZ"),
)


@dataclass
class CycleReport:
    """Outcome of one update cycle."""

    updated: list[Location] = field(default_factory=list)
    failed: dict[Location, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True, slots=True)
class LocationReport:
    """Registry read-back for one location."""

    location: Location
    measurement: Measurement | None
    fresh: bool
    suitable: bool


def build_measurement(resource: SolarResource, observed_at: int) -> Measurement:
    """Scale NREL's kWh/m²/day floats into a registry measurement."""
    if not resource.is_complete:
        raise ValueError("solar resource is missing annual averages")
    return Measurement(
        dni=scale_irradiance(resource.avg_dni),  # type: ignore[arg-type]
        ghi=scale_irradiance(resource.avg_ghi),  # type: ignore[arg-type]
        lat_tilt=scale_irradiance(resource.avg_lat_tilt),  # type: ignore[arg-type]
        last_updated=observed_at,
    )


class OracleAgent:
    """Feeds a :class:`RegistryStore` from a :class:`SolarResourceFetcher`.

    Parameters
    ----------
    config : OracleConfig
        Supplies the owner identity, pacing and read-back thresholds.
    store : RegistryStore
        Target registry store.
    fetcher : SolarResourceFetcher
        Source of irradiance data, normally an entered :class:`NrelClient`.
    clock : callable
        Observation timestamp source (Unix seconds).
    sleep : callable
        Awaited between locations; replaced in tests.
    """

    def __init__(
        self,
        config: OracleConfig,
        store: RegistryStore,
        fetcher: SolarResourceFetcher,
        *,
        clock: Callable[[], int] = lambda: int(time.time()),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._store = store
        self._fetcher = fetcher
        self._clock = clock
        self._sleep = sleep

    @property
    def owner(self) -> str:
        return self._config.owner

    def ensure_initialized(self) -> bool:
        """Create the owner's registry if needed.

        Returns ``True`` when a registry was created, ``False`` when one
        already existed.
        """
        try:
            self._store.initialize(self.owner)
        except AlreadyInitialized:
            _logger.info("Oracle already initialized for %s", self.owner)
            return False
        return True

    async def update_location(self, location: Location) -> Measurement:
        """Fetch one location and write it to the registry."""
        resource = await self._fetcher.fetch_solar_resource(location.lat, location.lon)
        measurement = build_measurement(resource, self._clock())
        key = location.key
        self._store.update(
            self.owner,
            key,
            dni=measurement.dni,
            ghi=measurement.ghi,
            lat_tilt=measurement.lat_tilt,
            observed_at=measurement.last_updated,
        )
        return measurement

    async def run_cycle(self, locations: Iterable[Location] = DEFAULT_LOCATIONS) -> CycleReport:
        """Update every location once, pausing ``update_delay`` after each success."""
        targets = list(locations)
        report = CycleReport()
        _logger.info(
            "Starting oracle update cycle: network=%s owner=%s locations=%d",
            self._config.network,
            self.owner,
            len(targets),
        )

        for location in targets:
            try:
                measurement = await self.update_location(location)
            except RegistryError as exc:
                # Rejections need corrected input or ownership, not a retry.
                _logger.warning("Registry rejected %s: %s", location, exc)
                report.failed[location] = exc
                continue
            except (SolarOracleError, ValueError) as exc:
                _logger.error("Failed to update location %s: %s", location, exc)
                report.failed[location] = exc
                continue
            except Exception as exc:
                _logger.exception("Unexpected error updating location %s", location)
                report.failed[location] = exc
                continue

            _logger.info(
                "Updated location %s: dni=%d ghi=%d lat_tilt=%d",
                location,
                measurement.dni,
                measurement.ghi,
                measurement.lat_tilt,
            )
            report.updated.append(location)
            if self._config.update_delay > 0:
                await self._sleep(self._config.update_delay)

        _logger.info(
            "Oracle update cycle completed: %d updated, %d failed",
            len(report.updated),
            len(report.failed),
        )
        return report

    def read_back(self, location: Location) -> LocationReport:
        """Report the stored value, freshness and suitability of *location*."""
        key = location.key
        measurement = None
        if self._store.exists(self.owner, key):
            measurement = self._store.get(self.owner, key)
        return LocationReport(
            location=location,
            measurement=measurement,
            fresh=self._store.is_fresh(self.owner, key, self._config.max_age_seconds),
            suitable=self._store.is_suitable(self.owner, key, self._config.min_dni),
        )
