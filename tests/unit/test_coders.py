"""Tests for the built-in coders."""

import pytest

from sourcecat.coders import (
    BytesCoder,
    JsonCoder,
    StringUtf8Coder,
    coder_from_spec,
)
from sourcecat.errors import (
    MalformedSpecError,
    SpecError,
    TypeMismatchError,
    UnknownCoderError,
)


def test_json_coder_decodes_bytes_and_str():
    coder = JsonCoder()

    assert coder.decode(b'{"name": "caf\xc3\xa9"}') == {"name": "café"}
    assert coder.decode("[1, 2]") == [1, 2]
    assert coder.encode({"name": "café"}) == '{"name": "café"}'.encode("utf-8")


def test_json_coder_rejects_invalid_json():
    with pytest.raises(ValueError):
        JsonCoder().decode("{not json")


def test_string_coder():
    coder = StringUtf8Coder()

    assert coder.decode(b"h\xc3\xa9") == "hé"
    assert coder.decode("plain") == "plain"
    assert coder.encode("hé") == b"h\xc3\xa9"


def test_bytes_coder():
    coder = BytesCoder()

    assert coder.decode("abc") == b"abc"
    assert coder.decode(b"\x00\x01") == b"\x00\x01"


def test_coders_compare_by_type():
    assert JsonCoder() == JsonCoder()
    assert JsonCoder() != StringUtf8Coder()
    assert len({JsonCoder(), JsonCoder(), BytesCoder()}) == 2


@pytest.mark.parametrize(
    "tag,cls",
    [("json", JsonCoder), ("string_utf8", StringUtf8Coder), ("bytes", BytesCoder)],
)
def test_coder_from_spec(tag, cls):
    assert isinstance(coder_from_spec({"@type": tag}), cls)


def test_coder_from_spec_unknown_tag():
    with pytest.raises(UnknownCoderError, match="avro") as excinfo:
        coder_from_spec({"@type": "avro"})

    assert isinstance(excinfo.value, SpecError)


@pytest.mark.parametrize(
    "spec,error",
    [
        ({}, MalformedSpecError),
        ({"@type": None}, MalformedSpecError),
        ({"@type": 3}, TypeMismatchError),
        ("json", TypeMismatchError),
    ],
)
def test_coder_from_spec_shape_errors(spec, error):
    with pytest.raises(error):
        coder_from_spec(spec)
