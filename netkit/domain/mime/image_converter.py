"""Image body converter backed by Pillow."""
from __future__ import annotations

import base64
import io
import json
from typing import ClassVar

from PIL import Image, UnidentifiedImageError

from netkit.domain.errors import ImageMimeConverterError


class ImageMimeConverter:
    """Encodes an in-memory image as PNG; decodes PNG/JPEG/GIF/TIFF bytes.

    With `base64_json_key` set, the body is a JSON object holding the
    base64 PNG under that key and the MIME type becomes application/json.
    """

    # "image/*" is a literal registered string, not a pattern.
    mime_types: ClassVar[frozenset[str]] = frozenset(
        {
            "image/png",
            "image/jpg",
            "image/jpeg",
            "image/gif",
            "image/tiff",
            "image/tif",
            "image/*",
        }
    )

    def __init__(self, image: Image.Image, *, base64_json_key: str | None = None) -> None:
        self.image = image
        self.base64_json_key = base64_json_key
        self.headers: dict[str, str] = {}
        self._data: bytes | None = None

    @property
    def mime_type(self) -> str:
        if self.base64_json_key:
            return "application/json;charset=UTF-8"
        return "image/png"

    def convert(self) -> bytes:
        if self._data is not None:
            return self._data
        png = self._png_representation()
        if self.base64_json_key:
            payload = {self.base64_json_key: base64.b64encode(png).decode("ascii")}
            self._data = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        else:
            self._data = png
        return self._data

    def _png_representation(self) -> bytes:
        buffer = io.BytesIO()
        try:
            self.image.save(buffer, format="PNG")
        except (OSError, ValueError) as exc:
            raise ImageMimeConverterError(f"could not convert to PNG representation: {exc}") from exc
        return buffer.getvalue()

    @classmethod
    def decode(cls, data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise ImageMimeConverterError(f"invalid image data: {exc}") from exc
        return image

    @classmethod
    def decode_base64_json(cls, data: bytes, key: str) -> Image.Image:
        """Decode the JSON-wrapped representation produced with `base64_json_key`."""
        try:
            encoded = json.loads(data)[key]
            raw = base64.b64decode(encoded, validate=True)
        except (ValueError, KeyError, TypeError) as exc:
            raise ImageMimeConverterError(f"invalid base64 JSON image: {exc}") from exc
        return cls.decode(raw)
