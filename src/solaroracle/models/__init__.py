"""Data models for registry values and NREL responses."""

from solaroracle.models._base import OracleBaseModel, UInt
from solaroracle.models.location import LocationKey
from solaroracle.models.measurement import Measurement
from solaroracle.models.nrel import SolarResource

__all__ = [
    "LocationKey",
    "Measurement",
    "OracleBaseModel",
    "SolarResource",
    "UInt",
]
