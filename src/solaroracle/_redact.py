"""Helpers for keeping the NREL API key out of logs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SECRET_PARAMS: frozenset[str] = frozenset({"api_key", "x-api-key", "authorization"})


def mask_secret(value: str, *, visible: int = 8) -> str:
    """Keep only the first *visible* characters of a secret."""
    if not value:
        return "NOT SET"
    if len(value) <= visible:
        return "<redacted>"
    return f"{value[:visible]}..."


def redact_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of request *params* with credential values replaced."""
    return {key: "<redacted>" if key.lower() in _SECRET_PARAMS else value for key, value in params.items()}
