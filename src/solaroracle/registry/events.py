"""Registry notifications.

Every successful write emits exactly one of these events, after the
mutation is committed. Consumers may treat the sequence as an audit or
replication log.
"""

from __future__ import annotations

import time
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now_seconds() -> int:
    return int(time.time())


class _RegistryEventBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    owner: str = Field(..., description="Registry owner identity")
    emitted_at: int = Field(default_factory=_now_seconds, description="Store clock at emission (epoch seconds)")

    @field_validator("owner")
    @classmethod
    def _require_owner(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("owner must be non-empty")
        return value


class OracleInitialized(_RegistryEventBase):
    """A registry was created for ``owner``."""

    event_type: Literal["oracle_initialized"] = "oracle_initialized"


class DataUpdated(_RegistryEventBase):
    """A measurement was inserted or replaced."""

    event_type: Literal["data_updated"] = "data_updated"
    latitude: int = Field(..., ge=0)
    longitude: int = Field(..., ge=0)
    dni: int = Field(..., ge=0)
    ghi: int = Field(..., ge=0)
    lat_tilt: int = Field(..., ge=0)
    timestamp: int = Field(..., ge=0, description="Observation time of the measurement")


RegistryEvent = Annotated[OracleInitialized | DataUpdated, Field(discriminator="event_type")]
