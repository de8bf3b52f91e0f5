from __future__ import annotations

import json

import httpx
import pytest

import main
from fetch_api.errors import HttpStatusFailure, TransportFailure
from fetch_api.form import FormData
from fetch_api.response import FetchResult


def parse(*argv):
    return main.build_parser().parse_args(list(argv))


def test_run_prints_json_body(monkeypatch, capsys):
    calls = []

    async def fake_fetch(path, **kwargs):
        calls.append((path, kwargs))
        return FetchResult(response=httpx.Response(200), json={"id": "1"})

    monkeypatch.setattr(main, "do_fetch_api", fake_fetch)
    code = main.run(parse("/api/v1/courses", "-p", "include[]=a", "-p", "include[]=b", "-H", "foo=bar"))

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"id": "1"}
    path, kwargs = calls[0]
    assert path == "/api/v1/courses"
    assert kwargs["params"] == {"include[]": ["a", "b"]}
    assert kwargs["headers"] == {"foo": "bar"}
    assert kwargs["method"] == "GET"
    assert kwargs["body"] is None


def test_run_sends_json_body_with_sync_transport(monkeypatch):
    calls = []

    def fake_fetch(path, **kwargs):
        calls.append(kwargs)
        return FetchResult(response=httpx.Response(204))

    monkeypatch.setattr(main, "do_fetch_api_sync", fake_fetch)
    code = main.run(parse("/x", "--sync", "-X", "post", "-d", '{"a": 1}', "--json"))

    assert code == 0
    assert calls[0]["method"] == "POST"
    assert calls[0]["body"] == {"a": 1}


def test_run_builds_form_data(monkeypatch, tmp_path):
    upload = tmp_path / "notes.txt"
    upload.write_bytes(b"hello")
    calls = []

    async def fake_fetch(path, **kwargs):
        calls.append(kwargs)
        return FetchResult(response=httpx.Response(200))

    monkeypatch.setattr(main, "do_fetch_api", fake_fetch)
    main.run(parse("/x", "-X", "POST", "--form", "name=a", "--form", f"file=@{upload}"))

    form = calls[0]["body"]
    assert isinstance(form, FormData)
    assert form.get("name") == "a"
    assert form.get("file") == b"hello"


def test_run_reports_status_failure(monkeypatch, capsys):
    async def fake_fetch(path, **kwargs):
        raise HttpStatusFailure("Unauthorized", httpx.Response(401))

    monkeypatch.setattr(main, "do_fetch_api", fake_fetch)
    code = main.run(parse("/x"))

    assert code == 1
    assert "[fetch] error status=401 path=/x: Unauthorized" in capsys.readouterr().err


def test_run_reports_transport_failure(monkeypatch, capsys):
    async def fake_fetch(path, **kwargs):
        raise TransportFailure("network failure")

    monkeypatch.setattr(main, "do_fetch_api", fake_fetch)
    assert main.run(parse("/x")) == 1
    assert "network failure" in capsys.readouterr().err


def test_run_all_pages(monkeypatch, capsys):
    async def fake_pages(path, **kwargs):
        return [1, 2, 3]

    monkeypatch.setattr(main, "fetch_all_pages", fake_pages)
    assert main.run(parse("/x", "--all-pages")) == 0
    out = capsys.readouterr()
    assert json.loads(out.out) == [1, 2, 3]
    assert "[fetch] items=3" in out.err


def test_bad_pair_exits():
    with pytest.raises(SystemExit):
        main.run(parse("/x", "-H", "nope"))
