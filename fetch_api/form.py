from __future__ import annotations

from typing import IO, Iterator, Union

FormValue = Union[str, bytes, IO[bytes]]

# Browsers name anonymous blobs "blob" in multipart bodies.
DEFAULT_FILENAME = "blob"


class FormData:
    """Ordered multipart form body.

    Names may repeat. String values are sent as plain fields; bytes and
    file-like values are sent as file parts.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[str, FormValue, str | None]] = []

    def append(self, name: str, value: FormValue, filename: str | None = None) -> None:
        if isinstance(value, str):
            self._entries.append((name, value, None))
            return
        self._entries.append((name, value, filename or DEFAULT_FILENAME))

    def get(self, name: str) -> FormValue | None:
        for entry_name, value, _ in self._entries:
            if entry_name == name:
                return value
        return None

    def getall(self, name: str) -> list[FormValue]:
        return [value for entry_name, value, _ in self._entries if entry_name == name]

    def to_files(self) -> list[tuple[str, tuple[str | None, FormValue]]]:
        # Same shape for httpx and requests: (name, (filename, content)).
        return [(name, (filename, value)) for name, value, filename in self._entries]

    def __iter__(self) -> Iterator[tuple[str, FormValue]]:
        for name, value, _ in self._entries:
            yield name, value

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"FormData({[name for name, _, _ in self._entries]!r})"
