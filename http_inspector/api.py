"""Client for the observability backend's aggregation API

Thin async wrapper around the HTTP calls and services endpoints using httpx.
The backend base URL comes from `rxconfig.api_url` (API_URL env var).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, ValidationError

import rxconfig
from http_inspector.config import HTTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

HTTP_CALLS_PATH = "/api/http-calls"
SERVICES_PATH = "/api/services"


class ApiError(Exception):
    """Raised when a backend call fails

    `status_code` is None for transport failures (backend unreachable,
    timeout) and the HTTP status for any non-2xx response.
    """

    def __init__(self, status_code: Optional[int], message: str) -> None:
        self.status_code = status_code
        self.message = message
        if status_code is None:
            super().__init__(message)
        else:
            super().__init__(f"HTTP {status_code}: {message}")


def _base_url(base_url: Optional[str]) -> str:
    return (base_url if base_url is not None else rxconfig.api_url).rstrip("/")


def _error_message(resp: httpx.Response) -> str:
    """Most specific message a failed response offers"""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    text = (resp.text or "").strip()
    if text:
        return text[:500]
    return f"HTTP {resp.status_code}"


async def _get_json(
    path: str,
    params: Optional[Mapping[str, Union[str, int]]] = None,
    base_url: Optional[str] = None,
) -> Dict[str, Any]:
    url = f"{_base_url(base_url)}{path}"
    try:
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
            resp = await client.get(url, params=params, headers={"Accept": "application/json"})
    except httpx.RequestError as exc:
        raise ApiError(None, str(exc) or exc.__class__.__name__) from exc

    if not 200 <= resp.status_code < 300:
        raise ApiError(resp.status_code, _error_message(resp))

    try:
        data = resp.json()
    except ValueError as exc:
        raise ApiError(resp.status_code, "Invalid JSON in response") from exc
    if not isinstance(data, dict):
        raise ApiError(resp.status_code, "Unexpected response shape")
    return data


async def list_http_calls(
    params: Mapping[str, Union[str, int]],
    base_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Fetch one page of aggregated HTTP calls

    Returns:
        Raw body: {http_calls: [...], total: int, total_calls: int}
    """
    return await _get_json(HTTP_CALLS_PATH, params=params, base_url=base_url)


class ServiceEntry(BaseModel):
    """One row of the services lookup"""
    service: str
    call_count: Optional[int] = None


async def list_services(base_url: Optional[str] = None) -> List[str]:
    """Fetch the names of services known to the backend"""
    data = await _get_json(SERVICES_PATH, base_url=base_url)
    names = []
    for entry in data.get("services") or []:
        try:
            parsed = ServiceEntry.model_validate(entry)
        except ValidationError:
            logger.debug("Skipping malformed service entry: %r", entry)
            continue
        if parsed.service:
            names.append(parsed.service)
    logger.info("Loaded %d services", len(names))
    return names
