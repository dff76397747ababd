"""Irradiance measurement model."""

from __future__ import annotations

from datetime import UTC, datetime

from solaroracle._constants import IRRADIANCE_SCALE
from solaroracle.models._base import OracleBaseModel, UInt


class Measurement(OracleBaseModel):
    """Latest irradiance values stored for one location.

    A measurement is replaced wholesale on every write; fields are never
    merged with a previous value.

    Parameters
    ----------
    dni : int
        Direct Normal Irradiance, kWh/m²/day ×100.
    ghi : int
        Global Horizontal Irradiance, kWh/m²/day ×100.
    lat_tilt : int
        Irradiance on a latitude-tilted plane, kWh/m²/day ×100.
    last_updated : int
        Observation time, Unix seconds.
    """

    dni: UInt
    ghi: UInt
    lat_tilt: UInt
    last_updated: UInt

    @property
    def last_updated_utc(self) -> datetime:
        return datetime.fromtimestamp(self.last_updated, tz=UTC)

    @property
    def dni_kwh(self) -> float:
        return self.dni / IRRADIANCE_SCALE

    @property
    def ghi_kwh(self) -> float:
        return self.ghi / IRRADIANCE_SCALE

    @property
    def lat_tilt_kwh(self) -> float:
        return self.lat_tilt / IRRADIANCE_SCALE

    def age_seconds(self, now: int) -> int:
        """Seconds since observation, clamped at zero for future-dated values."""
        return max(0, now - self.last_updated)
