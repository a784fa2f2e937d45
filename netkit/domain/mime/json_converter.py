"""JSON body converter."""
from __future__ import annotations

import json
from typing import Any, Callable, ClassVar

from netkit.domain.errors import JSONMimeConverterError

JSONProvider = Callable[[], Any]


class JSONMimeConverter:
    """Encodes a dict, list or already-serialized JSON string as UTF-8.

    `json` may also be a zero-argument callable evaluated at first encode;
    a provider returning None raises JSONMimeConverterError. The first
    successful encoding is memoized.
    """

    mime_types: ClassVar[frozenset[str]] = frozenset(
        {
            "application/json",
            "application/x-javascript",
            "text/javascript",
            "text/x-javascript",
            "text/x-json",
        }
    )

    def __init__(self, json: Any | JSONProvider) -> None:  # noqa: A002
        self._json = json
        self._data: bytes | None = None
        self.headers: dict[str, str] = {}

    @property
    def mime_type(self) -> str:
        return "application/json;charset=UTF-8"

    def convert(self) -> bytes:
        if self._data is not None:
            return self._data
        value = self._json() if callable(self._json) else self._json
        if value is None:
            raise JSONMimeConverterError("no JSON")
        self._data = _encode(value)
        return self._data

    @classmethod
    def decode(cls, data: bytes) -> Any:
        try:
            return json.loads(data)
        except ValueError as exc:
            raise JSONMimeConverterError(f"invalid JSON body: {exc}") from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.mime_type})"


def _encode(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise JSONMimeConverterError(f"JSON bytes are not UTF-8: {exc}") from exc
    if isinstance(value, str):
        # already serialized; must still be valid JSON
        try:
            json.loads(value)
        except ValueError as exc:
            raise JSONMimeConverterError(f"string is not serialized JSON: {exc}") from exc
        return value.encode("utf-8")
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise JSONMimeConverterError(f"value is not JSON serializable: {exc}") from exc
