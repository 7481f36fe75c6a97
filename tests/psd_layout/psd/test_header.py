from typing import Iterator

import pytest

from psd_layout.constants import ColorMode
from psd_layout.errors import InvalidHeader, InvalidSignature, UnsupportedVersion
from psd_layout.psd.bin_utils import ByteReader
from psd_layout.psd.header import FileHeader

from ..utils import header


@pytest.fixture
def fixture() -> Iterator[bytes]:
    yield (
        b"8BPS\x00\x01\x00\x00\x00\x00\x00\x00\x00\x03\x00\x00\x00\x96\x00"
        b"\x00\x00d\x00\x08\x00\x03"
    )


def test_header(fixture: bytes) -> None:
    fp = ByteReader(fixture)
    header = FileHeader.read(fp)
    assert header.version == 1
    assert header.channels == 3
    assert header.height == 150
    assert header.width == 100
    assert header.depth == 8
    assert header.color_mode == ColorMode.RGB
    assert fp.tell() == 26


def test_header_exception(fixture: bytes) -> None:
    with pytest.raises(ValueError):
        FileHeader.frombytes(b" " + fixture)


def test_invalid_signature() -> None:
    fp = ByteReader(header(signature=b"8BPX"))
    with pytest.raises(InvalidSignature):
        FileHeader.read(fp)
    assert fp.tell() == 4


def test_psb_is_unsupported() -> None:
    with pytest.raises(UnsupportedVersion):
        FileHeader.frombytes(header(version=2))


def test_truncated_header(fixture: bytes) -> None:
    with pytest.raises(EOFError):
        FileHeader.frombytes(fixture[:20])


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(channels=0),
        dict(depth=32),
        dict(color_mode=5),
        dict(width=0),
        dict(height=30001),
    ],
)
def test_invalid_fields(kwargs: dict) -> None:
    with pytest.raises(InvalidHeader):
        FileHeader.frombytes(header(**kwargs))


def test_invalid_fields_in_constructor() -> None:
    with pytest.raises(ValueError):
        FileHeader(depth=32)
