"""Base model and shared field types.

Every registry value model inherits from :class:`OracleBaseModel` which is
frozen (values are replaced, never mutated) and rejects unknown fields.

Integer fields mirror the unsigned integers of the on-chain layout and are
declared with :data:`UInt`: strict ints only (no float truncation, no
string or bool coercion), negatives refused at validation time.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictInt

UInt = Annotated[StrictInt, Field(ge=0)]
"""Non-negative strict integer (the unsigned fields of the registry layout)."""


class OracleBaseModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )
