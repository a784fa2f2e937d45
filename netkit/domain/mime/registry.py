"""Content-type registry: wire MIME type -> converter able to decode it.

Lookup is first match over an ordered list. The wire type is lower-cased
and stripped of parameters (`; charset=...`) before an exact membership
test against each converter's `mime_types`; there is no wildcard matching.
"""
from __future__ import annotations

import codecs
import threading
from typing import Any, Iterable

from netkit.constants import DEFAULT_CHARSET, TEXT_MIME_TYPES
from netkit.domain.errors import MimeConversionError
from netkit.domain.mime.image_converter import ImageMimeConverter
from netkit.domain.mime.json_converter import JSONMimeConverter
from netkit.domain.mime.multipart_converter import MultipartMimeConverter
from netkit.ports.mime_converter import MimeConverter

ConverterType = type[MimeConverter]


def parse_content_type(content_type: str | None) -> tuple[str, dict[str, str]]:
    """Split `type/subtype; k=v` into a lower-cased type and its parameters."""
    if not content_type:
        return "", {}
    mime, *raw_params = content_type.split(";")
    params: dict[str, str] = {}
    for raw in raw_params:
        key, sep, value = raw.partition("=")
        if sep:
            params[key.strip().lower()] = value.strip().strip('"')
    return mime.strip().lower(), params


def decode_text(data: bytes, charset: str | None) -> str:
    """Decode with the declared charset, falling back to UTF-8 for unknown names."""
    encoding = DEFAULT_CHARSET
    if charset:
        try:
            encoding = codecs.lookup(charset).name
        except LookupError:
            encoding = DEFAULT_CHARSET
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise MimeConversionError(f"body is not valid {encoding}: {exc}") from exc


class ContentTypeRegistry:
    """Ordered collection of converter classes."""

    def __init__(self, converters: Iterable[ConverterType] | None = None) -> None:
        self._lock = threading.Lock()
        self._converters: list[ConverterType] = list(converters or ())

    @property
    def converters(self) -> tuple[ConverterType, ...]:
        with self._lock:
            return tuple(self._converters)

    def register(self, converter: ConverterType, *, first: bool = False) -> None:
        with self._lock:
            if converter in self._converters:
                self._converters.remove(converter)
            if first:
                self._converters.insert(0, converter)
            else:
                self._converters.append(converter)

    def converter_for(self, content_type: str | None) -> ConverterType | None:
        mime, _ = parse_content_type(content_type)
        if not mime:
            return None
        for converter in self.converters:
            if mime in converter.mime_types:
                return converter
        return None

    def decode(self, data: bytes, content_type: str | None) -> Any:
        """Decode a response body. Unmatched types return `data` unchanged."""
        mime, params = parse_content_type(content_type)
        if mime in TEXT_MIME_TYPES:
            return decode_text(data, params.get("charset"))
        converter = self.converter_for(mime)
        if converter is None:
            return data
        return converter.decode(data)


def default_content_type_registry() -> ContentTypeRegistry:
    return ContentTypeRegistry([JSONMimeConverter, ImageMimeConverter, MultipartMimeConverter])
