"""HTTP transport for the NREL solar resource API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from solaroracle._constants import NREL_SOLAR_RESOURCE_ENDPOINT, USER_AGENT
from solaroracle._redact import mask_secret, redact_params
from solaroracle.config import OracleConfig
from solaroracle.exceptions import NrelApiError, NrelTransportError
from solaroracle.models.nrel import SolarResource

_logger = logging.getLogger(__name__)


class SolarResourceFetcher(Protocol):
    """Structural fetcher interface used by the oracle agent.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`NrelClient`) concrete.
    """

    async def fetch_solar_resource(self, lat: float, lon: float) -> SolarResource:
        ...


class NrelClient:
    """Async client for NREL's ``solar_resource`` endpoint.

    Usage::

        async with NrelClient(config) as nrel:
            resource = await nrel.fetch_solar_resource(37.7749, -122.4194)
    """

    def __init__(
        self,
        config: OracleConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session

    async def __aenter__(self) -> NrelClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
            )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise NrelTransportError(
                "Client not initialized. Use 'async with NrelClient(...) as client:'",
                endpoint=NREL_SOLAR_RESOURCE_ENDPOINT,
            )
        return self._http_session

    async def get_json(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET *endpoint* and return the decoded JSON object.

        Non-200 answers that still carry an NREL ``errors`` list are raised
        as :class:`NrelApiError`; everything else HTTP-level becomes
        :class:`NrelTransportError`.
        """
        http = self._require_session()
        url = f"{self._config.nrel_base_url}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s params=%s", url, redact_params(params))

        try:
            async with http.get(url, params=params, headers=headers) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise NrelTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise NrelTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        try:
            body: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise NrelTransportError(
                f"Invalid JSON from {endpoint} (HTTP {status}): {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict):
            raise NrelTransportError(
                f"Unexpected payload type from {endpoint}: {type(body).__name__}",
                status_code=status,
                endpoint=endpoint,
            )

        if status != 200:
            errors = body.get("errors")
            if isinstance(errors, list) and errors:
                raise NrelApiError(
                    f"NREL rejected request (HTTP {status}): {'; '.join(map(str, errors))}",
                    endpoint=endpoint,
                    errors=[str(e) for e in errors],
                )
            raise NrelTransportError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            )

        return body

    async def fetch_solar_resource(self, lat: float, lon: float) -> SolarResource:
        """Fetch annual irradiance averages for a point.

        Raises :class:`NrelApiError` when NREL reports errors or has no
        data for the location.
        """
        _logger.debug(
            "Fetching NREL data for lat=%s lon=%s (key %s)",
            lat,
            lon,
            mask_secret(self._config.nrel_api_key),
        )
        body = await self.get_json(
            NREL_SOLAR_RESOURCE_ENDPOINT,
            {"api_key": self._config.nrel_api_key, "lat": str(lat), "lon": str(lon)},
        )
        resource = SolarResource.model_validate(body)
        if resource.errors:
            raise NrelApiError(
                f"NREL reported errors for ({lat}, {lon}): {'; '.join(resource.errors)}",
                endpoint=NREL_SOLAR_RESOURCE_ENDPOINT,
                errors=resource.errors,
            )
        if not resource.is_complete:
            raise NrelApiError(
                f"NREL has no complete solar resource data for ({lat}, {lon})",
                endpoint=NREL_SOLAR_RESOURCE_ENDPOINT,
            )
        _logger.debug(
            "NREL data for (%s, %s): dni=%s ghi=%s lat_tilt=%s kWh/m²/day",
            lat,
            lon,
            resource.avg_dni,
            resource.avg_ghi,
            resource.avg_lat_tilt,
        )
        return resource
