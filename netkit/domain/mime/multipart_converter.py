"""Multipart body converter.

Wire layout (CRLF line endings)::

    --<boundary>
    <part header>: <value>
    Content-Type: <part mime type>

    <part bytes>
    --<boundary>            (--<boundary>-- after the last part)
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Sequence

from netkit.domain.errors import MultipartMimeConverterError
from netkit.ports.mime_converter import MimeConverter

CRLF = b"\r\n"


class MultipartMimeType(str, Enum):
    MIXED = "multipart/mixed"
    ALTERNATIVE = "multipart/alternative"
    DIGEST = "multipart/digest"
    PARALLEL = "multipart/parallel"


@dataclass(frozen=True)
class MultipartPart:
    """One decoded body part."""

    headers: dict[str, str] = field(default_factory=dict)
    content_type: str | None = None
    data: bytes = b""


def random_boundary() -> str:
    return "NETKit.boundary.%08x%08x" % (secrets.randbits(32), secrets.randbits(32))


class MultipartMimeConverter:
    """Concatenates child converters under one boundary generated per instance."""

    mime_types: ClassVar[frozenset[str]] = frozenset(t.value for t in MultipartMimeType)

    def __init__(self, mime_type: MultipartMimeType | str, parts: Sequence[MimeConverter]) -> None:
        if not parts:
            raise MultipartMimeConverterError("multipart body needs at least one part")
        self.type = MultipartMimeType(mime_type)
        self.parts: tuple[MimeConverter, ...] = tuple(parts)
        self.boundary = random_boundary()
        self.headers: dict[str, str] = {}
        self._data: bytes | None = None

    @property
    def mime_type(self) -> str:
        return f"{self.type.value}; boundary={self.boundary}"

    def convert(self) -> bytes:
        if self._data is not None:
            return self._data
        boundary = self.boundary.encode("utf-8")
        content = bytearray(b"--" + boundary + CRLF)
        last = len(self.parts) - 1
        for index, part in enumerate(self.parts):
            for key, value in part.headers.items():
                content += f"{key}: {value}".encode("utf-8") + CRLF
            content += f"Content-Type: {part.mime_type}".encode("utf-8") + CRLF + CRLF
            content += part.convert()
            closing = b"--" if index == last else b""
            content += CRLF + b"--" + boundary + closing + CRLF
        self._data = bytes(content)
        return self._data

    @classmethod
    def decode(cls, data: bytes) -> list[MultipartPart]:
        first_line, sep, _ = data.partition(CRLF)
        if not sep or not first_line.startswith(b"--") or len(first_line) <= 2:
            raise MultipartMimeConverterError("multipart body does not start with a boundary")
        delimiter = CRLF + first_line
        # the first delimiter has no leading CRLF
        body = CRLF + data
        chunks = body.split(delimiter)
        parts: list[MultipartPart] = []
        for chunk in chunks[1:]:
            if chunk.startswith(b"--"):
                break
            if not chunk.startswith(CRLF):
                raise MultipartMimeConverterError("malformed multipart delimiter")
            parts.append(_parse_part(chunk[len(CRLF):]))
        else:
            raise MultipartMimeConverterError("multipart body has no closing boundary")
        return parts

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type.value}, parts={len(self.parts)})"


def _parse_part(raw: bytes) -> MultipartPart:
    head, sep, payload = raw.partition(CRLF + CRLF)
    if not sep:
        raise MultipartMimeConverterError("multipart part is missing its header block")
    headers: dict[str, str] = {}
    content_type: str | None = None
    for line in head.split(CRLF):
        if not line:
            continue
        name, colon, value = line.decode("utf-8", errors="replace").partition(":")
        if not colon:
            raise MultipartMimeConverterError(f"malformed part header: {name!r}")
        name, value = name.strip(), value.strip()
        if name.lower() == "content-type":
            content_type = value
        else:
            headers[name] = value
    return MultipartPart(headers=headers, content_type=content_type, data=payload)
