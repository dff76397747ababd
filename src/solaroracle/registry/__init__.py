"""Registry layer.

This package holds the keyed store of irradiance registries (one per owner
identity) and the notifications it emits.
"""

from solaroracle.registry.events import DataUpdated, OracleInitialized, RegistryEvent
from solaroracle.registry.store import RegistrySnapshot, RegistryStats, RegistryStore

__all__ = [
    "DataUpdated",
    "OracleInitialized",
    "RegistryEvent",
    "RegistrySnapshot",
    "RegistryStats",
    "RegistryStore",
]
