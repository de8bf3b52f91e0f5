from __future__ import annotations

import argparse
import asyncio
import json
import sys

from fetch_api.client import do_fetch_api, do_fetch_api_sync, fetch_all_pages
from fetch_api.errors import FetchApiError, HttpStatusFailure
from fetch_api.form import FormData


def _pairs(values: list[str], flag: str) -> list[tuple[str, str]]:
    pairs = []
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep:
            raise SystemExit(f"{flag} expects key=value, got {raw!r}")
        pairs.append((key, value))
    return pairs


def _params(values: list[str]) -> dict[str, str | list[str]]:
    params: dict[str, str | list[str]] = {}
    for key, value in _pairs(values, "--param"):
        if key in params:
            existing = params[key]
            params[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            params[key] = value
    return params


def _body(args: argparse.Namespace):
    if args.form:
        form = FormData()
        for key, value in _pairs(args.form, "--form"):
            if value.startswith("@"):
                with open(value[1:], "rb") as f:
                    form.append(key, f.read(), filename=value[1:])
            else:
                form.append(key, value)
        return form
    if args.data is None:
        return None
    if args.json:
        return json.loads(args.data)
    return args.data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Call a JSON REST API")
    parser.add_argument("path", help="API path or absolute URL, e.g. /api/v1/courses")
    parser.add_argument("-X", "--method", default="GET")
    parser.add_argument("-p", "--param", action="append", default=[], help="Query parameter key=value (repeatable)")
    parser.add_argument("-H", "--header", action="append", default=[], help="Header key=value (repeatable)")
    parser.add_argument("-d", "--data", help="Request body")
    parser.add_argument("--json", action="store_true", help="Parse --data as JSON and send it as application/json")
    parser.add_argument("--form", action="append", default=[], help="Multipart field key=value or key=@file (repeatable)")
    parser.add_argument("--all-pages", action="store_true", help="Follow rel=next links and print every page")
    parser.add_argument("--show-link", action="store_true", help="Also print the parsed Link header")
    parser.add_argument("--sync", action="store_true", help="Use the blocking requests transport")
    return parser


def run(args: argparse.Namespace) -> int:
    kwargs = {
        "params": _params(args.param),
        "headers": dict(_pairs(args.header, "--header")),
        "method": args.method.upper(),
        "body": _body(args),
    }

    try:
        if args.all_pages:
            items = asyncio.run(fetch_all_pages(args.path, **kwargs))
            print(json.dumps(items, indent=2, ensure_ascii=False))
            print(f"[fetch] items={len(items)}", file=sys.stderr)
            return 0
        if args.sync:
            result = do_fetch_api_sync(args.path, **kwargs)
        else:
            result = asyncio.run(do_fetch_api(args.path, **kwargs))
    except HttpStatusFailure as e:
        print(f"[fetch] error status={e.status_code} path={args.path}: {e}", file=sys.stderr)
        return 1
    except FetchApiError as e:
        print(f"[fetch] error path={args.path}: {e}", file=sys.stderr)
        return 1

    if result.json is not None:
        print(json.dumps(result.json, indent=2, ensure_ascii=False))
    if args.show_link:
        print(f"[link] {json.dumps(result.link)}", file=sys.stderr)
    return 0


def main() -> None:
    args = build_parser().parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
