"""solaroracle - Solar irradiance registry fed from NREL."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("solaroracle")
except PackageNotFoundError:
    __version__ = "0+local"
from solaroracle._constants import (
    encode_latitude,
    encode_longitude,
    hundredths_to_decimal,
    microdegrees_to_degrees,
    scale_irradiance,
)
from solaroracle._transport import NrelClient, SolarResourceFetcher
from solaroracle.agent import DEFAULT_LOCATIONS, CycleReport, Location, LocationReport, OracleAgent
from solaroracle.config import OracleConfig
from solaroracle.exceptions import (
    AlreadyInitialized,
    LocationNotFound,
    NotAuthorized,
    NotInitialized,
    NrelApiError,
    NrelTransportError,
    OracleConfigError,
    RegistryError,
    SolarOracleError,
    StaleOrFutureData,
)
from solaroracle.models import LocationKey, Measurement, SolarResource
from solaroracle.registry import (
    DataUpdated,
    OracleInitialized,
    RegistryEvent,
    RegistrySnapshot,
    RegistryStats,
    RegistryStore,
)

__all__ = [
    "__version__",
    "AlreadyInitialized",
    "CycleReport",
    "DEFAULT_LOCATIONS",
    "DataUpdated",
    "Location",
    "LocationKey",
    "LocationNotFound",
    "LocationReport",
    "Measurement",
    "NotAuthorized",
    "NotInitialized",
    "NrelApiError",
    "NrelClient",
    "NrelTransportError",
    "OracleAgent",
    "OracleConfig",
    "OracleConfigError",
    "OracleInitialized",
    "RegistryError",
    "RegistryEvent",
    "RegistrySnapshot",
    "RegistryStats",
    "RegistryStore",
    "SolarOracleError",
    "SolarResource",
    "SolarResourceFetcher",
    "StaleOrFutureData",
    "encode_latitude",
    "encode_longitude",
    "hundredths_to_decimal",
    "microdegrees_to_degrees",
    "scale_irradiance",
]
