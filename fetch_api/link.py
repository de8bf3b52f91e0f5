from __future__ import annotations

import re
from typing import Iterator
from urllib.parse import parse_qsl, urlparse

LinkMap = dict[str, dict[str, str]]

# Entries are comma separated, but commas may appear inside the URL itself.
ENTRY_SPLIT = re.compile(r",\s*(?=<)")
URL_RE = re.compile(r"<([^>]*)>")
# Anchored to a parameter start so names like "myrel" don't match.
REL_RE = re.compile(r"""(?:^|;)\s*rel\s*=\s*(?:"([^"]*)"|([^;,\s]+))""", re.IGNORECASE)


def _query_params(url: str) -> dict[str, str]:
    return dict(parse_qsl(urlparse(url).query, keep_blank_values=True))


def _entries(value: str) -> Iterator[tuple[str, str]]:
    for entry in ENTRY_SPLIT.split(value.strip()):
        url_match = URL_RE.search(entry)
        if not url_match:
            continue
        url = url_match.group(1).strip()
        for quoted, bare in REL_RE.findall(entry[url_match.end():].strip()):
            # rel="next last" names two relations for the same URL
            for rel in (quoted or bare).split():
                yield rel, url


def parse_link_header(value: str | None) -> LinkMap | None:
    """
    '<http://api?page=2>; rel="next", <http://api?page=9>; rel="last"'
    -> {"next": {"page": "2"}, "last": {"page": "9"}}
    """
    if value is None:
        return None
    return {rel: _query_params(url) for rel, url in _entries(value)}


def link_urls(value: str | None) -> dict[str, str]:
    """Relation -> full URL, for callers that follow links as given."""
    if value is None:
        return {}
    return {rel: url for rel, url in _entries(value)}
