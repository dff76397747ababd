from __future__ import annotations

from solaroracle._redact import mask_secret, redact_params


def test_redact_params_hides_api_key() -> None:
    params = {"api_key": "SECRETKEY", "lat": "37.7749", "lon": "-122.4194"}

    redacted = redact_params(params)

    assert redacted == {"api_key": "<redacted>", "lat": "37.7749", "lon": "-122.4194"}
    assert params["api_key"] == "SECRETKEY"


def test_redact_params_is_case_insensitive() -> None:
    assert redact_params({"API_KEY": "x", "Authorization": "Bearer y"}) == {
        "API_KEY": "<redacted>",
        "Authorization": "<redacted>",
    }


def test_mask_secret() -> None:
    assert mask_secret("") == "NOT SET"
    assert mask_secret("short") == "<redacted>"
    assert mask_secret("abcdefghijkl") == "abcdefgh..."
