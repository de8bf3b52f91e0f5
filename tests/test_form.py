from __future__ import annotations

import io

from fetch_api.form import FormData


def test_keeps_duplicate_names_in_order():
    form = FormData()
    form.append("files", b"file1", "file1.txt")
    form.append("title", "hello")
    form.append("files", b"file2", "file2.txt")

    assert len(form) == 3
    assert list(form) == [("files", b"file1"), ("title", "hello"), ("files", b"file2")]
    assert form.getall("files") == [b"file1", b"file2"]
    assert form.get("files") == b"file1"
    assert form.get("missing") is None


def test_binary_entries_default_to_blob_filename():
    upload = io.BytesIO(b"data")
    form = FormData()
    form.append("attachment", upload)
    form.append("note", "")

    assert form.to_files() == [
        ("attachment", ("blob", upload)),
        ("note", (None, "")),
    ]
