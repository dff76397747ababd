"""Oracle configuration for solaroracle."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from solaroracle._constants import DEFAULT_NETWORK, NREL_BASE_URL
from solaroracle.exceptions import OracleConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class OracleConfig:
    """Oracle configuration.

    Parameters
    ----------
    nrel_api_key : str
        NREL developer API key.
    owner : str
        Identity of the registry owner the oracle writes as.
    network : str
        Label of the deployment network, used only for logging.
    nrel_base_url : str
        NREL API base URL.
    request_timeout : float
        Total HTTP timeout for one NREL request, in seconds.
    update_delay : float
        Pause between two locations of an update cycle, in seconds. Keeps
        the oracle under NREL's rate limit.
    max_age_seconds : int
        Default freshness window used by the read-back report.
    min_dni : int
        Default DNI threshold (×100) used by the read-back report.
    debug_logging : bool
        Enable DEBUG logging in the command-line runner.
    """

    nrel_api_key: str
    owner: str
    network: str = DEFAULT_NETWORK
    nrel_base_url: str = NREL_BASE_URL
    request_timeout: float = 60.0
    update_delay: float = 2.0
    max_age_seconds: int = 24 * 3600
    min_dni: int = 500
    debug_logging: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> OracleConfig:
        """Create configuration from environment variables.

        Reads ``NREL_API_KEY``, ``ORACLE_OWNER`` and the optional
        ``ORACLE_*``/``NREL_*`` variables below. Explicit keyword arguments
        override environment values.

        Returns
        -------
        OracleConfig
            Populated configuration. Call :meth:`validate` before use.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "NREL_API_KEY": "nrel_api_key",
            "ORACLE_OWNER": "owner",
            "ORACLE_NETWORK": "network",
            "NREL_BASE_URL": "nrel_base_url",
        }
        config_kwargs: dict[str, Any] = {"nrel_api_key": "", "owner": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("NREL_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        delay_env = env.get("ORACLE_UPDATE_DELAY")
        if delay_env is not None and "update_delay" not in overrides:
            config_kwargs["update_delay"] = float(delay_env)

        max_age_env = env.get("ORACLE_MAX_AGE_SECONDS")
        if max_age_env is not None and "max_age_seconds" not in overrides:
            config_kwargs["max_age_seconds"] = int(max_age_env)

        min_dni_env = env.get("ORACLE_MIN_DNI")
        if min_dni_env is not None and "min_dni" not in overrides:
            config_kwargs["min_dni"] = int(min_dni_env)

        if "debug_logging" not in overrides:
            config_kwargs["debug_logging"] = _env_bool(env.get("ORACLE_LOG_DEBUG"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

    def validate(self) -> OracleConfig:
        """Raise :class:`OracleConfigError` when a required value is missing."""
        if not self.nrel_api_key.strip():
            raise OracleConfigError("NREL_API_KEY is not set")
        if not self.owner.strip():
            raise OracleConfigError("ORACLE_OWNER is not set")
        if self.request_timeout <= 0:
            raise OracleConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.update_delay < 0:
            raise OracleConfigError(f"update_delay must not be negative, got {self.update_delay}")
        return self
