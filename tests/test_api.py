"""Tests for the backend API client

All HTTP calls are mocked via httpx.AsyncClient.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

import rxconfig
from http_inspector.api import ApiError, list_http_calls, list_services

BASE_URL = "http://backend:8080/"


def _mock_response(status_code=200, json_data=None, text=""):
    """Create a mock httpx.Response"""
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.text = text
    if json_data is not None:
        resp.json.return_value = json_data
    else:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    return resp


def _mock_client(response=None, error=None):
    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    if error is not None:
        client.get = AsyncMock(side_effect=error)
    else:
        client.get = AsyncMock(return_value=response)
    return client


# Tests for list_http_calls

@pytest.mark.asyncio
async def test_list_http_calls_success():
    """Test the request URL, parameters and returned body"""
    body = {"http_calls": [{"method": "GET", "request_uri": "/a"}], "total": 1, "total_calls": 5}
    client = _mock_client(_mock_response(200, body))
    params = {"from": "2024-01-01 12:00:00", "to": "2024-01-02 12:00:00", "limit": 50, "offset": 0}

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        result = await list_http_calls(params, base_url=BASE_URL)

    assert result == body
    args, kwargs = client.get.call_args
    assert args[0] == "http://backend:8080/api/http-calls"
    assert kwargs["params"] == params


@pytest.mark.asyncio
async def test_list_http_calls_uses_configured_base_url(monkeypatch):
    """Test that API_URL from rxconfig is the default backend"""
    monkeypatch.setattr(rxconfig, "api_url", "http://observer:9000")
    client = _mock_client(_mock_response(200, {"http_calls": []}))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        await list_http_calls({})

    assert client.get.call_args[0][0] == "http://observer:9000/api/http-calls"


@pytest.mark.asyncio
async def test_list_http_calls_bad_request():
    """Test a rejected filter surfaces the backend's error text"""
    client = _mock_client(_mock_response(400, {"error": "invalid filter syntax"}))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        with pytest.raises(ApiError) as exc_info:
            await list_http_calls({"filter": "bad((("}, base_url=BASE_URL)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "invalid filter syntax"


@pytest.mark.asyncio
async def test_list_http_calls_message_field():
    client = _mock_client(_mock_response(422, {"message": "limit too large"}))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        with pytest.raises(ApiError) as exc_info:
            await list_http_calls({}, base_url=BASE_URL)

    assert exc_info.value.message == "limit too large"


@pytest.mark.asyncio
async def test_list_http_calls_plain_text_error():
    """Test a non-JSON error body"""
    client = _mock_client(_mock_response(500, text="Internal Server Error"))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        with pytest.raises(ApiError) as exc_info:
            await list_http_calls({}, base_url=BASE_URL)

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Internal Server Error"


@pytest.mark.asyncio
async def test_list_http_calls_empty_error_body():
    client = _mock_client(_mock_response(502))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        with pytest.raises(ApiError) as exc_info:
            await list_http_calls({}, base_url=BASE_URL)

    assert exc_info.value.message == "HTTP 502"


@pytest.mark.asyncio
async def test_list_http_calls_unreachable():
    """Test a transport failure has no status code"""
    client = _mock_client(error=httpx.ConnectError("Connection refused"))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        with pytest.raises(ApiError) as exc_info:
            await list_http_calls({}, base_url=BASE_URL)

    assert exc_info.value.status_code is None
    assert exc_info.value.message == "Connection refused"


@pytest.mark.asyncio
async def test_list_http_calls_invalid_json():
    client = _mock_client(_mock_response(200, text="<html>"))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        with pytest.raises(ApiError, match="Invalid JSON"):
            await list_http_calls({}, base_url=BASE_URL)


@pytest.mark.asyncio
async def test_list_http_calls_unexpected_shape():
    client = _mock_client(_mock_response(200, [1, 2, 3]))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        with pytest.raises(ApiError, match="Unexpected response shape"):
            await list_http_calls({}, base_url=BASE_URL)


# Tests for list_services

@pytest.mark.asyncio
async def test_list_services():
    """Test service names are extracted and malformed entries skipped"""
    body = {
        "services": [
            {"service": "api", "call_count": 120},
            {"service": "web"},
            {"service": ""},
            {"service": None},
            {"name": "orphan"},
            "billing",
        ]
    }
    client = _mock_client(_mock_response(200, body))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        services = await list_services(base_url=BASE_URL)

    assert services == ["api", "web"]
    assert client.get.call_args[0][0] == "http://backend:8080/api/services"


@pytest.mark.asyncio
async def test_list_services_missing_key():
    client = _mock_client(_mock_response(200, {}))

    with patch("http_inspector.api.httpx.AsyncClient", return_value=client):
        assert await list_services(base_url=BASE_URL) == []
