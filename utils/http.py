# utils/http.py
from __future__ import annotations

import os

import httpx
import requests
from requests import Response

BASE_URL = os.getenv("FETCH_API_BASE_URL", "http://localhost")
TIMEOUT = float(os.getenv("FETCH_API_TIMEOUT", "20"))

DEFAULT_HEADERS = {
    # Canvas-style APIs serialize numeric ids as strings under this media type.
    "Accept": "application/json+canvas-string-ids, application/json",
    "X-Requested-With": "XMLHttpRequest",
}

# Options each transport forwards; anything else in fetch_opts is dropped.
HTTPX_BUILD_OPTS = {"timeout", "extensions"}
HTTPX_SEND_OPTS = {"follow_redirects"}
REQUESTS_OPTS = {"timeout", "allow_redirects", "verify", "proxies", "cert"}

# session.cookies doubles as the cookie store for the async transport;
# httpx adopts a CookieJar instance without copying it.
session = requests.Session()


def _debug(msg: str) -> None:
    if os.getenv("DEBUG_FETCH_API") == "1":
        print(f"[http] {msg}")


def document_cookie() -> str:
    return "; ".join(f"{c.name}={c.value}" for c in session.cookies)


def _absolute(url: str) -> str:
    if url.startswith(("http://", "https://")):
        return url
    return BASE_URL.rstrip("/") + "/" + url.lstrip("/")


def _split_options(options: dict, known: set[str]) -> tuple[dict, dict]:
    opts = dict(options)
    core = {
        "method": opts.pop("method", "GET"),
        "headers": dict(opts.pop("headers", None) or {}),
        "body": opts.pop("body", None),
        "credentials": opts.pop("credentials", "same-origin"),
    }
    extra = {k: v for k, v in opts.items() if k in known}
    ignored = sorted(k for k in opts if k not in known)
    if ignored:
        _debug(f"ignoring options {ignored}")
    return core, extra


def _body_kwargs(body) -> dict:
    # FormData is duck-typed to avoid importing fetch_api from the transport layer.
    if body is None:
        return {}
    if hasattr(body, "to_files"):
        return {"files": body.to_files()}
    return {"content": body}


async def send(url: str, options: dict, client: httpx.AsyncClient | None = None) -> httpx.Response:
    core, extra = _split_options(options, HTTPX_BUILD_OPTS | HTTPX_SEND_OPTS)
    build_opts = {k: v for k, v in extra.items() if k in HTTPX_BUILD_OPTS}
    send_opts = {k: v for k, v in extra.items() if k in HTTPX_SEND_OPTS}
    build_opts.setdefault("timeout", TIMEOUT)

    if client is None:
        async with httpx.AsyncClient(cookies=session.cookies) as own_client:
            return await _send_with(own_client, url, core, build_opts, send_opts)
    return await _send_with(client, url, core, build_opts, send_opts)


async def _send_with(
    client: httpx.AsyncClient,
    url: str,
    core: dict,
    build_opts: dict,
    send_opts: dict,
) -> httpx.Response:
    request = client.build_request(
        core["method"],
        _absolute(url),
        headers=core["headers"],
        **_body_kwargs(core["body"]),
        **build_opts,
    )
    if core["credentials"] == "omit":
        request.headers.pop("Cookie", None)

    _debug(f"{request.method} {request.url}")
    resp = await client.send(request, **send_opts)
    _debug(f"{resp.status_code} {request.url}")
    return resp


def send_sync(url: str, options: dict) -> Response:
    core, kwargs = _split_options(options, REQUESTS_OPTS)
    timeout = kwargs.pop("timeout", TIMEOUT)

    body = core["body"]
    if body is not None and hasattr(body, "to_files"):
        kwargs["files"] = body.to_files()
    elif body is not None:
        kwargs["data"] = body

    if core["credentials"] == "omit":
        # An empty per-request jar still merges with session.cookies, so bypass the session.
        _debug(f"{core['method']} {url} (no cookies)")
        return requests.request(core["method"], _absolute(url), headers=core["headers"], timeout=timeout, **kwargs)

    _debug(f"{core['method']} {url}")
    resp = session.request(core["method"], _absolute(url), headers=core["headers"], timeout=timeout, **kwargs)
    _debug(f"{resp.status_code} {url}")
    return resp
