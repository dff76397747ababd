from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest

from solaroracle._transport import NrelClient
from solaroracle.config import OracleConfig
from solaroracle.exceptions import NrelApiError, NrelTransportError

_OK_BODY = {
    "version": "1.0.0",
    "errors": [],
    "outputs": {
        "avg_dni": {"annual": 6.06},
        "avg_ghi": {"annual": 5.08},
        "avg_lat_tilt": {"annual": 5.95},
    },
}


class _FakeResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


@dataclass
class FakeSession:
    status: int = 200
    body: Any = field(default_factory=lambda: _OK_BODY)
    raise_exc: Exception | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    def get(self, url: str, *, params: dict[str, Any], headers: dict[str, str]) -> _FakeResponse:
        self.calls.append({"url": url, "params": params, "headers": headers})
        if self.raise_exc is not None:
            raise self.raise_exc
        text = self.body if isinstance(self.body, str) else json.dumps(self.body)
        return _FakeResponse(self.status, text)


@pytest.fixture
def config() -> OracleConfig:
    return OracleConfig(nrel_api_key="test-key-123456", owner="0xoracle", nrel_base_url="https://nrel.test")


@pytest.mark.asyncio
async def test_fetch_solar_resource_parses_outputs(config: OracleConfig) -> None:
    session = FakeSession()
    async with NrelClient(config, session=session) as nrel:  # type: ignore[arg-type]
        resource = await nrel.fetch_solar_resource(37.7749, -122.4194)

    assert resource.avg_dni == pytest.approx(6.06)
    assert resource.avg_ghi == pytest.approx(5.08)
    call = session.calls[0]
    assert call["url"] == "https://nrel.test/api/solar/solar_resource/v1.json"
    assert call["params"] == {"api_key": "test-key-123456", "lat": "37.7749", "lon": "-122.4194"}
    assert call["headers"]["accept"] == "application/json"


@pytest.mark.asyncio
async def test_error_status_with_errors_is_api_error(config: OracleConfig) -> None:
    session = FakeSession(status=403, body={"errors": ["An invalid api_key was supplied."]})
    async with NrelClient(config, session=session) as nrel:  # type: ignore[arg-type]
        with pytest.raises(NrelApiError) as excinfo:
            await nrel.fetch_solar_resource(0.0, 0.0)

    assert excinfo.value.errors == ["An invalid api_key was supplied."]


@pytest.mark.asyncio
async def test_error_status_without_errors_is_transport_error(config: OracleConfig) -> None:
    session = FakeSession(status=502, body={"message": "bad gateway"})
    async with NrelClient(config, session=session) as nrel:  # type: ignore[arg-type]
        with pytest.raises(NrelTransportError) as excinfo:
            await nrel.fetch_solar_resource(0.0, 0.0)

    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_invalid_json(config: OracleConfig) -> None:
    session = FakeSession(body="<html>oops</html>")
    async with NrelClient(config, session=session) as nrel:  # type: ignore[arg-type]
        with pytest.raises(NrelTransportError, match="Invalid JSON"):
            await nrel.fetch_solar_resource(0.0, 0.0)


@pytest.mark.asyncio
async def test_client_error_is_wrapped(config: OracleConfig) -> None:
    session = FakeSession(raise_exc=aiohttp.ClientConnectionError("refused"))
    async with NrelClient(config, session=session) as nrel:  # type: ignore[arg-type]
        with pytest.raises(NrelTransportError) as excinfo:
            await nrel.fetch_solar_resource(0.0, 0.0)

    assert isinstance(excinfo.value.__cause__, aiohttp.ClientConnectionError)


@pytest.mark.asyncio
async def test_no_data_location_is_api_error(config: OracleConfig) -> None:
    session = FakeSession(body={"errors": [], "outputs": {"avg_dni": "no data", "avg_ghi": "no data"}})
    async with NrelClient(config, session=session) as nrel:  # type: ignore[arg-type]
        with pytest.raises(NrelApiError, match="no complete"):
            await nrel.fetch_solar_resource(51.5, -0.12)


@pytest.mark.asyncio
async def test_requires_context_manager(config: OracleConfig) -> None:
    with pytest.raises(NrelTransportError, match="not initialized"):
        await NrelClient(config).fetch_solar_resource(0.0, 0.0)


@pytest.mark.asyncio
async def test_external_session_not_closed(config: OracleConfig) -> None:
    session = FakeSession()
    client = NrelClient(config, session=session)  # type: ignore[arg-type]
    async with client:
        pass

    assert client._http_session is session  # noqa: SLF001


@pytest.mark.asyncio
async def test_api_key_not_logged(config: OracleConfig, caplog: pytest.LogCaptureFixture) -> None:
    session = FakeSession()
    with caplog.at_level(logging.DEBUG, logger="solaroracle._transport"):
        async with NrelClient(config, session=session) as nrel:  # type: ignore[arg-type]
            await nrel.fetch_solar_resource(37.7749, -122.4194)

    assert "test-key-123456" not in caplog.text
    assert "<redacted>" in caplog.text
