"""Keyed in-memory registry store.

This is the only component allowed to mutate registry state. It holds one
registry per owner identity; each registry maps a :class:`LocationKey` to
the latest :class:`Measurement` and keeps two counters.

Mutations on a registry are serialized by a per-registry lock, and reads
copy their view under the same lock, so no caller can observe a counter
that disagrees with the entry map.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import NamedTuple

from solaroracle.exceptions import (
    AlreadyInitialized,
    LocationNotFound,
    NotAuthorized,
    NotInitialized,
    StaleOrFutureData,
)
from solaroracle.models.location import LocationKey
from solaroracle.models.measurement import Measurement
from solaroracle.registry.events import DataUpdated, OracleInitialized, RegistryEvent

_logger = logging.getLogger(__name__)

EventListener = Callable[[RegistryEvent], None]


def _now_seconds() -> int:
    return int(time.time())


class RegistryStats(NamedTuple):
    total_locations: int
    update_count: int


@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    """Read-only copy of one registry at a point in time."""

    owner: str
    entries: Mapping[LocationKey, Measurement]
    total_locations: int
    update_count: int

    @property
    def stats(self) -> RegistryStats:
        return RegistryStats(self.total_locations, self.update_count)


@dataclass
class _Registry:
    owner: str
    entries: dict[LocationKey, Measurement] = field(default_factory=dict)
    total_locations: int = 0
    update_count: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def snapshot(self) -> RegistrySnapshot:
        # Measurements are frozen, so a shallow copy of the map is enough.
        return RegistrySnapshot(
            owner=self.owner,
            entries=MappingProxyType(dict(self.entries)),
            total_locations=self.total_locations,
            update_count=self.update_count,
        )


class RegistryStore:
    """Registries of solar irradiance measurements, one per owner identity.

    Usage::

        store = RegistryStore()
        store.initialize("0xoracle")
        store.update("0xoracle", key, dni=580, ghi=520, lat_tilt=600, observed_at=1704067200)
        store.get("0xoracle", key)

    Parameters
    ----------
    clock : callable
        Returns the current accepted time in Unix seconds. Writes whose
        ``observed_at`` exceeds this value are rejected, and freshness is
        measured against it.
    listeners : iterable of callables
        Called with every emitted event after the write has been committed.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], int] = _now_seconds,
        listeners: Iterable[EventListener] = (),
    ) -> None:
        self._clock = clock
        self._listeners: list[EventListener] = list(listeners)
        self._registries: dict[str, _Registry] = {}
        self._events: list[RegistryEvent] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    @property
    def events(self) -> tuple[RegistryEvent, ...]:
        """Every event emitted so far, oldest first."""
        with self._lock:
            return tuple(self._events)

    def _record(self, event: RegistryEvent) -> list[EventListener]:
        with self._lock:
            self._events.append(event)
            return list(self._listeners)

    def _dispatch(self, event: RegistryEvent, listeners: list[EventListener]) -> None:
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                _logger.warning("Registry event listener failed for %s", event.event_type, exc_info=True)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _lookup(self, owner: str) -> _Registry | None:
        with self._lock:
            return self._registries.get(owner)

    def _require(self, owner: str) -> _Registry:
        registry = self._lookup(owner)
        if registry is None:
            raise NotInitialized(f"No registry initialized for {owner!r}", owner=owner)
        return registry

    def _find(self, owner: str, key: LocationKey) -> Measurement | None:
        registry = self._lookup(owner)
        if registry is None:
            return None
        with registry.lock:
            return registry.entries.get(key)

    def is_initialized(self, owner: str) -> bool:
        return self._lookup(owner) is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def initialize(self, caller: str) -> RegistrySnapshot:
        """Create an empty registry owned by *caller*.

        Raises :class:`AlreadyInitialized` if *caller* already owns one.
        """
        if not caller or not caller.strip():
            raise ValueError("caller identity must be non-empty")

        with self._lock:
            if caller in self._registries:
                raise AlreadyInitialized(f"Registry already initialized for {caller!r}", owner=caller)
            registry = _Registry(owner=caller)
            self._registries[caller] = registry
            event = OracleInitialized(owner=caller, emitted_at=self._clock())
            self._events.append(event)
            listeners = list(self._listeners)
            # Not yet visible to other callers, so no registry lock is needed.
            snapshot = registry.snapshot()

        _logger.info("Initialized registry for %s", caller)
        self._dispatch(event, listeners)
        return snapshot

    def update(
        self,
        caller: str,
        key: LocationKey,
        dni: int,
        ghi: int,
        lat_tilt: int,
        observed_at: int,
    ) -> None:
        """Insert or replace the measurement for *key* in *caller*'s registry.

        An absent key is inserted and counts towards ``total_locations``; a
        present key has its measurement replaced wholesale. ``update_count``
        grows on every accepted call.

        Only observation times later than the store clock are rejected
        (:class:`StaleOrFutureData`). Older timestamps are accepted, even when
        that moves a key's ``last_updated`` backwards.

        Raises
        ------
        NotInitialized
            *caller* owns no registry.
        NotAuthorized
            *caller* is not the registry's owner.
        StaleOrFutureData
            ``observed_at`` is in the future.
        """
        measurement = Measurement(dni=dni, ghi=ghi, lat_tilt=lat_tilt, last_updated=observed_at)
        registry = self._require(caller)

        with registry.lock:
            if registry.owner != caller:
                raise NotAuthorized(
                    f"{caller!r} is not the owner of this registry",
                    owner=registry.owner,
                    caller=caller,
                )

            now = self._clock()
            if measurement.last_updated > now:
                raise StaleOrFutureData(
                    f"Observation time {measurement.last_updated} is ahead of current time {now}",
                    owner=caller,
                    observed_at=measurement.last_updated,
                    now=now,
                )

            previous = registry.entries.get(key)
            registry.entries[key] = measurement
            if previous is None:
                registry.total_locations += 1
            registry.update_count += 1

            event = DataUpdated(
                owner=caller,
                emitted_at=now,
                latitude=key.latitude,
                longitude=key.longitude,
                dni=measurement.dni,
                ghi=measurement.ghi,
                lat_tilt=measurement.lat_tilt,
                timestamp=measurement.last_updated,
            )
            listeners = self._record(event)

        if previous is None:
            _logger.debug("Inserted %s for %s (dni=%d)", key, caller, measurement.dni)
        else:
            if measurement.last_updated < previous.last_updated:
                _logger.debug(
                    "Measurement for %s rolled back from %d to %d",
                    key,
                    previous.last_updated,
                    measurement.last_updated,
                )
            _logger.debug("Replaced %s for %s (dni=%d)", key, caller, measurement.dni)
        self._dispatch(event, listeners)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, owner: str, key: LocationKey) -> Measurement:
        """Return the current measurement for *key*.

        Raises :class:`NotInitialized` or :class:`LocationNotFound`.
        """
        registry = self._require(owner)
        with registry.lock:
            measurement = registry.entries.get(key)
        if measurement is None:
            raise LocationNotFound(f"No data for location {key}", owner=owner, key=key)
        return measurement.model_copy()

    def exists(self, owner: str, key: LocationKey) -> bool:
        return self._find(owner, key) is not None

    def stats(self, owner: str) -> RegistryStats:
        """Return ``(total_locations, update_count)``.

        Raises :class:`NotInitialized`.
        """
        registry = self._require(owner)
        with registry.lock:
            return RegistryStats(registry.total_locations, registry.update_count)

    def snapshot(self, owner: str) -> RegistrySnapshot:
        registry = self._require(owner)
        with registry.lock:
            return registry.snapshot()

    def is_fresh(self, owner: str, key: LocationKey, max_age_seconds: int) -> bool:
        """Whether the data for *key* is at most *max_age_seconds* old.

        Missing data (or a missing registry) is never fresh. A measurement
        dated after the current clock counts as age zero.
        """
        measurement = self._find(owner, key)
        if measurement is None:
            return False
        return measurement.age_seconds(self._clock()) <= max_age_seconds

    def is_suitable(self, owner: str, key: LocationKey, min_dni_threshold: int) -> bool:
        """Whether *key* has data with ``dni >= min_dni_threshold``."""
        measurement = self._find(owner, key)
        if measurement is None:
            return False
        return measurement.dni >= min_dni_threshold
