"""Location key model."""

from __future__ import annotations

from solaroracle._constants import (
    LATITUDE_SHIFT,
    LONGITUDE_SHIFT,
    MICRODEGREES_PER_DEGREE,
    encode_latitude,
    encode_longitude,
)
from solaroracle.models._base import OracleBaseModel, UInt


class LocationKey(OracleBaseModel):
    """Composite registry key in shifted microdegrees.

    Two keys are equal only when both integers match exactly; there is no
    proximity matching or rounding.

    Parameters
    ----------
    latitude : int
        ``(lat + 90) * 1_000_000``, truncated.
    longitude : int
        ``(lon + 180) * 1_000_000``, truncated.
    """

    latitude: UInt
    longitude: UInt

    @classmethod
    def from_degrees(cls, lat: float, lon: float) -> LocationKey:
        """Encode signed decimal degrees into a key."""
        return cls(latitude=encode_latitude(lat), longitude=encode_longitude(lon))

    @property
    def latitude_degrees(self) -> float:
        """Signed latitude recovered from the encoded value."""
        return self.latitude / MICRODEGREES_PER_DEGREE - LATITUDE_SHIFT

    @property
    def longitude_degrees(self) -> float:
        """Signed longitude recovered from the encoded value."""
        return self.longitude / MICRODEGREES_PER_DEGREE - LONGITUDE_SHIFT

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"
