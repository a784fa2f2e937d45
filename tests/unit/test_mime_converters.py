"""Unit tests for the JSON, image and multipart converters and the content-type registry."""
from __future__ import annotations

import io

import pytest
from PIL import Image

from netkit.domain.errors import (
    ImageMimeConverterError,
    JSONMimeConverterError,
    MimeConversionError,
    MultipartMimeConverterError,
)
from netkit.domain.mime.image_converter import ImageMimeConverter
from netkit.domain.mime.json_converter import JSONMimeConverter
from netkit.domain.mime.multipart_converter import MultipartMimeConverter, MultipartMimeType, MultipartPart
from netkit.domain.mime.registry import (
    ContentTypeRegistry,
    decode_text,
    default_content_type_registry,
    parse_content_type,
)
from netkit.ports.mime_converter import MimeConverter


def _image(color: tuple[int, int, int] = (255, 0, 0)) -> Image.Image:
    return Image.new("RGB", (4, 3), color)


# ---- JSON ----


@pytest.mark.parametrize("value", [{"a": [1, 2, {"b": None}]}, [1, "two", 3.5], "scalar", 42, True])
def test_json_round_trip(value):
    converter = JSONMimeConverter(value if not isinstance(value, str) else '"scalar"')

    assert JSONMimeConverter.decode(converter.convert()) == value


def test_json_encoding_is_memoized():
    calls = []

    def provider():
        calls.append(1)
        return {"n": len(calls)}

    converter = JSONMimeConverter(provider)
    first = converter.convert()

    assert converter.convert() is first
    assert first == b'{"n":1}'
    assert calls == [1]


def test_json_keeps_non_ascii_as_utf8():
    assert JSONMimeConverter({"name": "Zoë"}).convert() == '{"name":"Zoë"}'.encode("utf-8")


def test_json_provider_returning_none_fails():
    with pytest.raises(JSONMimeConverterError, match="no JSON"):
        JSONMimeConverter(lambda: None).convert()


def test_json_rejects_unserializable_values():
    with pytest.raises(JSONMimeConverterError):
        JSONMimeConverter({"when": object()}).convert()


def test_json_rejects_strings_that_are_not_json():
    with pytest.raises(JSONMimeConverterError):
        JSONMimeConverter("{oops").convert()


def test_json_decode_of_malformed_body_raises_instead_of_returning_empty():
    with pytest.raises(JSONMimeConverterError):
        JSONMimeConverter.decode(b"{not json")


def test_json_converter_satisfies_the_port():
    converter = JSONMimeConverter({})

    assert isinstance(converter, MimeConverter)
    assert converter.mime_type == "application/json;charset=UTF-8"
    assert "text/x-json" in JSONMimeConverter.mime_types


# ---- Image ----


def test_image_encodes_png_and_decodes_back():
    converter = ImageMimeConverter(_image((0, 128, 255)))

    data = converter.convert()
    decoded = ImageMimeConverter.decode(data)

    assert data.startswith(b"\x89PNG")
    assert converter.convert() is data
    assert decoded.size == (4, 3)
    assert decoded.convert("RGB").getpixel((0, 0)) == (0, 128, 255)


def test_image_decodes_jpeg():
    buffer = io.BytesIO()
    _image().save(buffer, format="JPEG")

    decoded = ImageMimeConverter.decode(buffer.getvalue())

    assert decoded.format == "JPEG"
    assert decoded.size == (4, 3)


def test_image_base64_json_mode():
    converter = ImageMimeConverter(_image(), base64_json_key="avatar")

    data = converter.convert()

    assert converter.mime_type == "application/json;charset=UTF-8"
    assert data.startswith(b'{"avatar":"')
    assert ImageMimeConverter.decode_base64_json(data, "avatar").size == (4, 3)


def test_image_decode_rejects_garbage():
    with pytest.raises(ImageMimeConverterError):
        ImageMimeConverter.decode(b"definitely not an image")


# ---- Multipart ----


def test_multipart_requires_parts():
    with pytest.raises(MultipartMimeConverterError):
        MultipartMimeConverter(MultipartMimeType.MIXED, [])


def test_multipart_boundary_separates_every_part():
    first = JSONMimeConverter({"a": 1})
    first.headers["Content-Disposition"] = 'form-data; name="meta"'
    second = JSONMimeConverter([2])
    converter = MultipartMimeConverter(MultipartMimeType.MIXED, [first, second])

    data = converter.convert()
    boundary = converter.boundary.encode()

    assert converter.mime_type == f"multipart/mixed; boundary={converter.boundary}"
    assert data.startswith(b"--" + boundary + b"\r\n")
    assert data.count(b"--" + boundary) == 3
    assert data.endswith(b"\r\n--" + boundary + b"--\r\n")
    assert b'Content-Disposition: form-data; name="meta"\r\nContent-Type: application/json' in data
    assert converter.convert() is data


def test_multipart_boundaries_differ_per_instance():
    parts = [JSONMimeConverter({})]

    assert (
        MultipartMimeConverter("multipart/alternative", parts).boundary
        != MultipartMimeConverter("multipart/alternative", parts).boundary
    )


def test_multipart_decode_returns_parts_in_order():
    first = JSONMimeConverter({"a": 1})
    first.headers["X-Part"] = "one"
    converter = MultipartMimeConverter(MultipartMimeType.PARALLEL, [first, JSONMimeConverter([2])])

    parts = MultipartMimeConverter.decode(converter.convert())

    assert parts == [
        MultipartPart(headers={"X-Part": "one"}, content_type="application/json;charset=UTF-8", data=b'{"a":1}'),
        MultipartPart(headers={}, content_type="application/json;charset=UTF-8", data=b"[2]"),
    ]


def test_multipart_nested_part_errors_propagate():
    converter = MultipartMimeConverter(MultipartMimeType.MIXED, [JSONMimeConverter(lambda: None)])

    with pytest.raises(JSONMimeConverterError):
        converter.convert()


def test_multipart_decode_rejects_unterminated_body():
    with pytest.raises(MultipartMimeConverterError):
        MultipartMimeConverter.decode(b"--b\r\nContent-Type: text/plain\r\n\r\nhello")


# ---- Registry ----


def test_parse_content_type_lowercases_and_reads_params():
    assert parse_content_type('Text/HTML; Charset="ISO-8859-1"') == ("text/html", {"charset": "ISO-8859-1"})
    assert parse_content_type(None) == ("", {})


def test_registry_matches_case_insensitively_without_charset():
    registry = default_content_type_registry()

    assert registry.converter_for("Application/JSON; charset=utf-8") is JSONMimeConverter
    assert registry.converter_for("image/jpeg") is ImageMimeConverter
    assert registry.converter_for("multipart/digest; boundary=x") is MultipartMimeConverter
    assert registry.converter_for("application/xml") is None


def test_registry_has_no_wildcard_matching():
    registry = default_content_type_registry()

    assert registry.converter_for("image/*") is ImageMimeConverter
    assert registry.converter_for("image/webp") is None


def test_registry_decodes_html_with_declared_charset():
    registry = default_content_type_registry()

    assert registry.decode("café".encode("latin-1"), "text/html; charset=iso-8859-1") == "café"
    assert registry.decode(b"<p>ok</p>", "text/html; charset=bogus") == "<p>ok</p>"


def test_registry_passes_unmatched_bytes_through():
    assert default_content_type_registry().decode(b"raw", "application/octet-stream") == b"raw"
    assert default_content_type_registry().decode(b"raw", None) == b"raw"


def test_registry_first_match_wins():
    class LooseJSON:
        mime_types = frozenset({"application/json"})

        @classmethod
        def decode(cls, data: bytes) -> str:
            return "loose"

    registry = ContentTypeRegistry([JSONMimeConverter])
    registry.register(LooseJSON, first=True)  # type: ignore[arg-type]

    assert registry.decode(b"{}", "application/json") == "loose"
    assert registry.converters[0] is LooseJSON


def test_decode_text_reports_undecodable_bytes():
    with pytest.raises(MimeConversionError):
        decode_text(b"\xff\xfe\xfa", "utf-8")
