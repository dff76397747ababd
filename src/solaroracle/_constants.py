"""Internal constants shared across the library."""

from __future__ import annotations

import math

NREL_BASE_URL = "https://developer.nrel.gov"
NREL_SOLAR_RESOURCE_ENDPOINT = "/api/solar/solar_resource/v1.json"
USER_AGENT = "solaroracle/0.1 (+aiohttp)"
DEFAULT_NETWORK = "devnet"

# ------------------------------------------------------------------
# Coordinate encoding  (signed degrees -> shifted microdegrees)
# ------------------------------------------------------------------

MICRODEGREES_PER_DEGREE = 1_000_000
LATITUDE_SHIFT = 90
LONGITUDE_SHIFT = 180


def encode_latitude(lat: float) -> int:
    """Shift *lat* into ``[0, 180]`` and scale to integer microdegrees.

    Raises :class:`ValueError` if *lat* is outside ``[-90, 90]``.
    """
    value = float(lat)
    if not -LATITUDE_SHIFT <= value <= LATITUDE_SHIFT:
        raise ValueError(f"latitude must be between -90 and 90 degrees, got {value}")
    return math.floor((value + LATITUDE_SHIFT) * MICRODEGREES_PER_DEGREE)


def encode_longitude(lon: float) -> int:
    """Shift *lon* into ``[0, 360]`` and scale to integer microdegrees.

    Raises :class:`ValueError` if *lon* is outside ``[-180, 180]``.
    """
    value = float(lon)
    if not -LONGITUDE_SHIFT <= value <= LONGITUDE_SHIFT:
        raise ValueError(f"longitude must be between -180 and 180 degrees, got {value}")
    return math.floor((value + LONGITUDE_SHIFT) * MICRODEGREES_PER_DEGREE)


def microdegrees_to_degrees(value: int) -> int:
    """Integer degrees of a microdegree value (the shift is not undone)."""
    return value // MICRODEGREES_PER_DEGREE


# ------------------------------------------------------------------
# Irradiance scale  (kWh/m²/day -> hundredths)
# ------------------------------------------------------------------

IRRADIANCE_SCALE = 100


def scale_irradiance(value: float) -> int:
    """Convert a kWh/m²/day reading to the stored ×100 integer."""
    scaled = math.floor(float(value) * IRRADIANCE_SCALE)
    if scaled < 0:
        raise ValueError(f"irradiance must be non-negative, got {value}")
    return scaled


def hundredths_to_decimal(value: int) -> int:
    return value // IRRADIANCE_SCALE
