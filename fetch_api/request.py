from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping
from urllib.parse import unquote, urlencode

from fetch_api.form import FormData
from utils.http import DEFAULT_HEADERS, document_cookie

CSRF_COOKIE = "_csrf_token"

CookieSource = Callable[[], str]


@dataclass
class RequestSpec:
    path: str
    params: Mapping[str, str | list[str]] | None = None
    headers: Mapping[str, str] | None = None
    method: str = "GET"
    body: Any = None
    fetch_opts: Mapping[str, Any] | None = None


@dataclass
class ResolvedRequest:
    url: str
    options: dict[str, Any] = field(default_factory=dict)


def read_cookie(cookie_string: str, name: str) -> str | None:
    for part in cookie_string.split(";"):
        key, sep, value = part.strip().partition("=")
        if sep and key == name:
            return unquote(value)
    return None


def build_url(path: str, params: Mapping[str, str | list[str]] | None) -> str:
    if not params:
        return path
    qs = urlencode(params, doseq=True)
    sep = "&" if "?" in path else "?"
    return f"{path}{sep}{qs}"


def default_headers(cookies: CookieSource | None = None) -> dict[str, str]:
    headers = dict(DEFAULT_HEADERS)
    token = read_cookie((cookies or document_cookie)(), CSRF_COOKIE)
    if token is not None:
        headers["X-CSRF-Token"] = token
    return headers


def build_request(spec: RequestSpec, cookies: CookieSource | None = None) -> ResolvedRequest:
    headers = default_headers(cookies)
    headers.update(spec.headers or {})

    options: dict[str, Any] = {"method": spec.method or "GET", "headers": headers}

    body = spec.body
    if isinstance(body, (FormData, str, bytes)):
        # Multipart boundaries are chosen by the transport, so Content-Type stays unset.
        options["body"] = body
    elif body is not None:
        options["body"] = json.dumps(body)
        headers.setdefault("Content-Type", "application/json")

    options["credentials"] = "same-origin"
    options.update(spec.fetch_opts or {})
    return ResolvedRequest(url=build_url(spec.path, spec.params), options=options)
