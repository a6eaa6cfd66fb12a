"""Request pipeline: serialize, send with a dual deadline, classify or parse."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from mandoline.config import RequestConfig
from mandoline.exceptions import MandolineError, handle_error
from mandoline.utils import to_local_case, to_wire_case

logger = logging.getLogger(__name__)


def _query_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def process_url(api_base_url: str, endpoint: str, params: dict | None = None) -> str:
    """Join base URL and endpoint, appending wire-cased params.

    List values repeat the key (``tags=a&tags=b``); None is sent as ``null``.
    """
    url = f"{api_base_url}/{endpoint}"
    if not params:
        return url

    items: list[tuple[str, str]] = []
    for key, value in to_wire_case(params).items():
        if isinstance(value, list):
            items.extend((key, _query_value(item)) for item in value)
        else:
            items.append((key, _query_value(value)))
    return f"{url}?{httpx.QueryParams(items)}"


def process_request_body(data: dict | None = None) -> bytes | None:
    if data is None:
        return None
    return json.dumps(to_wire_case(data), allow_nan=False).encode("utf-8")


def build_timeout(config: RequestConfig) -> httpx.Timeout:
    return httpx.Timeout(config.rwp_timeout_seconds, connect=config.connect_timeout_seconds)


async def make_request_with_timeout(
    config: RequestConfig,
    method: str,
    url: str,
    headers: dict[str, str],
    body: bytes | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """Send one request on a short-lived client.

    The connect deadline is enforced by httpx and only covers establishing the
    connection; once connected it no longer applies. The read/write/process
    deadline bounds the whole exchange, body included. Both scopes close on
    every exit.
    """
    async with httpx.AsyncClient(timeout=build_timeout(config), transport=transport) as http:
        async with asyncio.timeout(config.rwp_timeout_seconds):
            return await http.request(method, url, headers=headers, content=body)


def process_response(response: httpx.Response) -> Any:
    if not response.is_success:
        raise handle_error(response)
    if not response.content:
        return None
    return to_local_case(response.json())


async def make_request(
    config: RequestConfig,
    method: str,
    endpoint: str,
    auth_header: dict[str, str],
    params: dict | None = None,
    data: dict | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Perform a request and return the local-cased JSON body.

    Raises:
        MandolineError: for every failure, already classified.
    """
    headers = {**auth_header, "Content-Type": "application/json"}
    try:
        url = process_url(config.api_base_url, endpoint, params)
        body = process_request_body(data)
        logger.debug("%s %s", method, url)
        response = await make_request_with_timeout(
            config, method, url, headers, body, transport=transport
        )
        return process_response(response)
    except MandolineError:
        raise
    except Exception as e:
        raise handle_error(e) from e
