"""MIME converter port: typed value <-> wire bytes, keyed by MIME type strings.

Converters are used two ways: an instance encodes a request body
(`convert`), and the class decodes a response body (`decode`) when the
response content type is one of its `mime_types`.
"""
from __future__ import annotations

from typing import Any, ClassVar, Protocol, runtime_checkable


@runtime_checkable
class MimeConverter(Protocol):
    """Port: one encodable body value plus a class-level decoder."""

    mime_types: ClassVar[frozenset[str]]
    headers: dict[str, str]

    @property
    def mime_type(self) -> str:
        """MIME type written as the Content-Type of the encoded bytes."""
        ...

    def convert(self) -> bytes:
        """Encode the held value. Repeated calls return identical bytes."""
        ...

    @classmethod
    def decode(cls, data: bytes) -> Any:
        """Decode wire bytes into a typed value; raise MimeConversionError on failure."""
        ...
