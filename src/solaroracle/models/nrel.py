"""NREL solar resource response model."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def _annual(outputs: dict[str, Any], name: str) -> Any:
    block = outputs.get(name)
    if isinstance(block, dict):
        return block.get("annual")
    # NREL returns "no data" as a bare string for some locations.
    return None


class SolarResource(BaseModel):
    """Annual averages from the NREL ``solar_resource`` endpoint.

    All three irradiance values are in kWh/m²/day and are ``None`` when
    NREL has no data for the requested location.

    Parameters
    ----------
    avg_dni : float or None
        Annual average Direct Normal Irradiance.
    avg_ghi : float or None
        Annual average Global Horizontal Irradiance.
    avg_lat_tilt : float or None
        Annual average irradiance at latitude tilt.
    errors : list of str
        Error messages reported by NREL.
    raw : dict
        Full API response dict.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    avg_dni: float | None = None
    avg_ghi: float | None = None
    avg_lat_tilt: float | None = None
    errors: list[str] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_outputs(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "outputs" not in values:
            return values
        outputs = values.get("outputs")
        if not isinstance(outputs, dict):
            outputs = {}
        return {
            "avg_dni": _annual(outputs, "avg_dni"),
            "avg_ghi": _annual(outputs, "avg_ghi"),
            "avg_lat_tilt": _annual(outputs, "avg_lat_tilt"),
            "errors": values.get("errors") or [],
            "raw": values,
        }

    @field_validator("avg_dni", "avg_ghi", "avg_lat_tilt", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("errors", mode="before")
    @classmethod
    def _coerce_errors(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(item) for item in value]

    @property
    def is_complete(self) -> bool:
        """Whether all three annual averages are present."""
        return None not in (self.avg_dni, self.avg_ghi, self.avg_lat_tilt)
