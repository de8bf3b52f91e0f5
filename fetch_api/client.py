from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

import httpx
import requests

from fetch_api.errors import HttpStatusFailure, TransportFailure
from fetch_api.link import link_urls
from fetch_api.request import CookieSource, RequestSpec, build_request
from fetch_api.response import FetchResult, interpret_response, read_response
from utils.http import send, send_sync

AsyncTransport = Callable[[str, dict], Awaitable[Any]]
SyncTransport = Callable[[str, dict], Any]

TRANSPORT_ERRORS = (httpx.RequestError, requests.RequestException, OSError)


def _status_message(response: Any) -> str:
    status = response.status_code
    reason = httpx.codes.get_reason_phrase(status) or getattr(response, "reason", None)
    return reason or f"HTTP {status}"


def _check_status(response: Any) -> None:
    # Runs before the body is parsed, so non-JSON error pages still normalize.
    if not 200 <= response.status_code < 300:
        raise HttpStatusFailure(_status_message(response), response)


async def do_fetch_api(
    path: str,
    *,
    params: Mapping[str, str | list[str]] | None = None,
    headers: Mapping[str, str] | None = None,
    method: str = "GET",
    body: Any = None,
    fetch_opts: Mapping[str, Any] | None = None,
    transport: AsyncTransport | None = None,
    cookies: CookieSource | None = None,
) -> FetchResult:
    """Issue one JSON API request.

    Raises TransportFailure when no response arrives and HttpStatusFailure
    when the status is outside 200-299. A 2xx response with a malformed JSON
    body raises json.JSONDecodeError unchanged.
    """
    spec = RequestSpec(path, params, headers, method, body, fetch_opts)
    resolved = build_request(spec, cookies)

    try:
        response = await (transport or send)(resolved.url, resolved.options)
    except TRANSPORT_ERRORS as exc:
        raise TransportFailure(str(exc)) from exc

    _check_status(response)
    return await read_response(response)


def do_fetch_api_sync(
    path: str,
    *,
    params: Mapping[str, str | list[str]] | None = None,
    headers: Mapping[str, str] | None = None,
    method: str = "GET",
    body: Any = None,
    fetch_opts: Mapping[str, Any] | None = None,
    transport: SyncTransport | None = None,
    cookies: CookieSource | None = None,
) -> FetchResult:
    spec = RequestSpec(path, params, headers, method, body, fetch_opts)
    resolved = build_request(spec, cookies)

    try:
        response = (transport or send_sync)(resolved.url, resolved.options)
    except TRANSPORT_ERRORS as exc:
        raise TransportFailure(str(exc)) from exc

    _check_status(response)
    return interpret_response(response)


async def fetch_all_pages(
    path: str,
    *,
    params: Mapping[str, str | list[str]] | None = None,
    max_pages: int = 100,
    **kwargs,
) -> list:
    """Follow rel="next" links and concatenate the list bodies of every page.

    The next URL is requested exactly as the server sent it; the caller's
    params only apply to the first page.
    """
    url: str | None = path
    page_params = params
    results: list = []

    for _ in range(max_pages):
        result = await do_fetch_api(url, params=page_params, **kwargs)
        if isinstance(result.json, list):
            results.extend(result.json)
        elif result.json is not None:
            results.append(result.json)

        url = link_urls(result.response.headers.get("Link")).get("next")
        if url is None:
            break
        page_params = None

    return results
