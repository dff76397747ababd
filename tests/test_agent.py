from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from solaroracle.agent import DEFAULT_LOCATIONS, Location, OracleAgent, build_measurement
from solaroracle.config import OracleConfig
from solaroracle.exceptions import NotInitialized, NrelApiError, StaleOrFutureData
from solaroracle.models.nrel import SolarResource
from solaroracle.registry.events import DataUpdated
from solaroracle.registry.store import RegistryStore

NOW = 1_704_067_200
OWNER = "0xoracle"


def _resource(dni: float = 6.06, ghi: float = 5.08, lat_tilt: float = 5.95) -> SolarResource:
    return SolarResource(avg_dni=dni, avg_ghi=ghi, avg_lat_tilt=lat_tilt)


@dataclass
class FakeFetcher:
    resources: dict[tuple[float, float], SolarResource] = field(default_factory=dict)
    calls: list[tuple[float, float]] = field(default_factory=list)

    async def fetch_solar_resource(self, lat: float, lon: float) -> SolarResource:
        self.calls.append((lat, lon))
        resource = self.resources.get((lat, lon))
        if resource is None:
            raise NrelApiError(f"no data for ({lat}, {lon})")
        return resource


@dataclass
class FakeSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def config() -> OracleConfig:
    return OracleConfig(nrel_api_key="k", owner=OWNER, update_delay=2.0, min_dni=500)


@pytest.fixture
def store() -> RegistryStore:
    return RegistryStore(clock=lambda: NOW)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(resources={(loc.lat, loc.lon): _resource() for loc in DEFAULT_LOCATIONS})


def _agent(config: OracleConfig, store: RegistryStore, fetcher: FakeFetcher, sleep: FakeSleep) -> OracleAgent:
    return OracleAgent(config, store, fetcher, clock=lambda: NOW, sleep=sleep)


def test_build_measurement_scales_values() -> None:
    measurement = build_measurement(_resource(dni=6.25, ghi=5.5, lat_tilt=6.0), NOW)

    assert (measurement.dni, measurement.ghi, measurement.lat_tilt) == (625, 550, 600)
    assert measurement.last_updated == NOW


def test_build_measurement_requires_complete_resource() -> None:
    with pytest.raises(ValueError):
        build_measurement(SolarResource(avg_dni=1.0), NOW)


def test_ensure_initialized_is_idempotent(config: OracleConfig, store: RegistryStore, fetcher: FakeFetcher) -> None:
    agent = _agent(config, store, fetcher, FakeSleep())

    assert agent.ensure_initialized() is True
    assert agent.ensure_initialized() is False
    assert store.stats(OWNER) == (0, 0)


@pytest.mark.asyncio
async def test_run_cycle_updates_every_location(
    config: OracleConfig, store: RegistryStore, fetcher: FakeFetcher
) -> None:
    sleep = FakeSleep()
    agent = _agent(config, store, fetcher, sleep)
    agent.ensure_initialized()

    report = await agent.run_cycle()

    assert report.ok
    assert report.updated == list(DEFAULT_LOCATIONS)
    assert store.stats(OWNER) == (3, 3)
    assert sleep.delays == [2.0, 2.0, 2.0]
    assert sum(isinstance(e, DataUpdated) for e in store.events) == 3


@pytest.mark.asyncio
async def test_second_cycle_overwrites(config: OracleConfig, store: RegistryStore, fetcher: FakeFetcher) -> None:
    agent = _agent(config, store, fetcher, FakeSleep())
    agent.ensure_initialized()

    await agent.run_cycle()
    await agent.run_cycle()

    assert store.stats(OWNER) == (3, 6)


@pytest.mark.asyncio
async def test_failure_on_one_location_does_not_stop_cycle(
    config: OracleConfig, store: RegistryStore, fetcher: FakeFetcher
) -> None:
    london = Location(lat=51.5074, lon=-0.1278, name="London")
    agent = _agent(config, store, fetcher, FakeSleep())
    agent.ensure_initialized()

    report = await agent.run_cycle([london, *DEFAULT_LOCATIONS])

    assert not report.ok
    assert isinstance(report.failed[london], NrelApiError)
    assert len(report.updated) == 3
    assert store.stats(OWNER) == (3, 3)


@dataclass
class BrokenFetcher(FakeFetcher):
    broken: set[tuple[float, float]] = field(default_factory=set)

    async def fetch_solar_resource(self, lat: float, lon: float) -> SolarResource:
        if (lat, lon) in self.broken:
            self.calls.append((lat, lon))
            raise KeyError("outputs")
        return await super().fetch_solar_resource(lat, lon)


@pytest.mark.asyncio
async def test_unexpected_fetcher_error_does_not_stop_cycle(config: OracleConfig, store: RegistryStore) -> None:
    first = DEFAULT_LOCATIONS[0]
    fetcher = BrokenFetcher(
        resources={(loc.lat, loc.lon): _resource() for loc in DEFAULT_LOCATIONS},
        broken={(first.lat, first.lon)},
    )
    agent = _agent(config, store, fetcher, FakeSleep())
    agent.ensure_initialized()

    report = await agent.run_cycle()

    assert isinstance(report.failed[first], KeyError)
    assert report.updated == list(DEFAULT_LOCATIONS[1:])
    assert store.stats(OWNER) == (2, 2)


@pytest.mark.asyncio
async def test_uninitialized_registry_is_reported(
    config: OracleConfig, store: RegistryStore, fetcher: FakeFetcher
) -> None:
    agent = _agent(config, store, fetcher, FakeSleep())

    report = await agent.run_cycle(DEFAULT_LOCATIONS[:1])

    assert isinstance(report.failed[DEFAULT_LOCATIONS[0]], NotInitialized)


@pytest.mark.asyncio
async def test_future_clock_is_rejected(config: OracleConfig, fetcher: FakeFetcher) -> None:
    store = RegistryStore(clock=lambda: NOW - 60)
    agent = _agent(config, store, fetcher, FakeSleep())
    agent.ensure_initialized()

    report = await agent.run_cycle(DEFAULT_LOCATIONS[:1])

    assert isinstance(report.failed[DEFAULT_LOCATIONS[0]], StaleOrFutureData)
    assert store.stats(OWNER) == (0, 0)


@pytest.mark.asyncio
async def test_read_back(config: OracleConfig, store: RegistryStore, fetcher: FakeFetcher) -> None:
    phoenix = DEFAULT_LOCATIONS[2]
    fetcher.resources[(phoenix.lat, phoenix.lon)] = _resource(dni=4.5)
    agent = _agent(config, store, fetcher, FakeSleep())
    agent.ensure_initialized()
    await agent.run_cycle([phoenix])

    report = agent.read_back(phoenix)
    missing = agent.read_back(Location(lat=0.0, lon=0.0))

    assert report.measurement is not None
    assert report.measurement.dni == 450
    assert report.fresh is True
    assert report.suitable is False
    assert missing.measurement is None
    assert missing.fresh is False
