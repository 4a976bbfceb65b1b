"""
Unit tests for the relay pieces below the HTTP layer: settings, payload, RelayHandler.
Run with: pytest test_relay.py -v
"""

import asyncio

import httpx
import pytest

import exceptions
from config import Settings, get_settings
from relay import RelayHandler
from upstream import build_payload


def _handler(status_code=200, body=None, key="sk-unit-test"):
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code, json=body))
    return RelayHandler(Settings(openai_api_key=key), transport=transport)


# --------------- Settings ---------------

def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.example.com/v1/")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.openai_api_key == "sk-env"
    assert settings.openai_base_url == "https://proxy.example.com/v1"
    assert settings.upstream_timeout == 12.5
    assert settings.log_level == "DEBUG"


def test_get_settings_defaults(monkeypatch):
    for name in ("OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_MODEL", "UPSTREAM_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()
    assert settings.openai_api_key is None
    assert settings.openai_base_url == "https://api.openai.com/v1"
    assert settings.openai_model == "gpt-4o-mini"
    assert settings.upstream_timeout == 30.0


def test_settings_repr_hides_key():
    settings = Settings(openai_api_key="sk-very-secret")
    assert "sk-very-secret" not in repr(settings)
    assert "sk-very-secret" not in str(settings)


def test_get_settings_strips_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "  sk-env\n")
    assert get_settings().openai_api_key == "sk-env"


@pytest.mark.parametrize("raw", ["", "abc", "0", "-5", "nan"])
def test_invalid_timeout_falls_back_to_default(monkeypatch, caplog, raw):
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", raw)
    assert get_settings().upstream_timeout == 30.0
    assert "UPSTREAM_TIMEOUT_SECONDS" in caplog.text


def test_unknown_log_level_falls_back_to_info(monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    assert get_settings().log_level == "INFO"
    assert "LOG_LEVEL" in caplog.text


# --------------- Payload ---------------

def test_build_payload_uses_fixed_parameters():
    payload = build_payload("gpt-4o-mini", [{"role": "user", "content": "hi"}])
    assert payload["temperature"] == 0.7
    assert payload["max_tokens"] == 800
    assert payload["top_p"] == 1.0
    assert payload["frequency_penalty"] == 0
    assert payload["presence_penalty"] == 0


# --------------- RelayHandler ---------------

def test_handle_success():
    body = {
        "choices": [{"message": {"content": "hello there"}}],
        "usage": {"prompt_tokens": 7, "completion_tokens": 4, "total_tokens": 11},
    }
    result = asyncio.run(_handler(body=body).handle([{"role": "user", "content": "hi"}]))
    assert result.success is True
    assert result.message == "hello there"
    assert result.usage.totalTokens == 11
    assert result.error is None


def test_handle_without_key_raises_configuration_error():
    with pytest.raises(exceptions.ConfigurationError) as excinfo:
        asyncio.run(_handler(key=None).handle([]))
    assert excinfo.value.status_code == 500


@pytest.mark.parametrize("status_code, error_type, http_status", [
    (401, exceptions.UpstreamAuthError, 500),
    (429, exceptions.UpstreamRateLimited, 429),
    (404, exceptions.UpstreamError, 500),
    (500, exceptions.UpstreamError, 500),
])
def test_handle_maps_upstream_status(status_code, error_type, http_status):
    with pytest.raises(error_type) as excinfo:
        asyncio.run(_handler(status_code, body={"error": {"message": "boom"}}).handle([]))
    assert excinfo.value.status_code == http_status


def test_handle_accepts_string_error_field():
    with pytest.raises(exceptions.UpstreamError) as excinfo:
        asyncio.run(_handler(400, body={"error": "bad request"}).handle([]))
    assert excinfo.value.detail == "Upstream error: bad request"


def test_handle_wraps_unexpected_faults():
    def explode(request):
        raise httpx.ConnectError("dns lookup failed")

    relay = RelayHandler(Settings(openai_api_key="sk-unit-test"), transport=httpx.MockTransport(explode))
    with pytest.raises(exceptions.InternalError) as excinfo:
        asyncio.run(relay.handle([]))
    assert "dns lookup failed" in excinfo.value.detail


def test_handle_redacts_key_from_faults(caplog):
    key = "sk-unit-secret"

    def refuse(request):
        raise httpx.LocalProtocolError(f"Illegal header value b'Bearer {key}\\n'")

    relay = RelayHandler(Settings(openai_api_key=key), transport=httpx.MockTransport(refuse))
    with pytest.raises(exceptions.InternalError) as excinfo:
        asyncio.run(relay.handle([]))
    assert key not in excinfo.value.detail
    assert "Bearer ***" in excinfo.value.detail
    assert key not in caplog.text
    assert "Traceback" not in caplog.text
