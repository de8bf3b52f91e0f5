from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from fetch_api.link import LinkMap, parse_link_header


@dataclass(frozen=True)
class FetchResult:
    response: Any
    json: Any = None
    link: LinkMap | None = None


def interpret_response(response: Any) -> FetchResult:
    """Build a FetchResult from a response whose body has already been read.

    Works with both httpx.Response and requests.Response. A non-empty body
    that is not JSON raises json.JSONDecodeError.
    """
    text = response.text
    data = json.loads(text) if text else None
    link = parse_link_header(response.headers.get("Link"))
    return FetchResult(response=response, json=data, link=link)


async def read_response(response: Any) -> FetchResult:
    await response.aread()
    return interpret_response(response)
