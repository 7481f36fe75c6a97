import zlib

import pytest

from psd_layout.constants import ColorMode, Compression
from psd_layout.errors import UnexpectedEOF
from psd_layout.psd.header import FileHeader
from psd_layout.psd.image_data import ImageData

from ..utils import image_data, pack

PLANES = [b"\x01\x02\x03\x04", b"\x05\x06\x07\x08", b"\x09\x0a\x0b\x0c"]


@pytest.fixture
def header() -> FileHeader:
    return FileHeader(channels=3, height=2, width=2, depth=8, color_mode=ColorMode.RGB)


@pytest.mark.parametrize("compression", [0, 1])
def test_image_data(header: FileHeader, compression: int) -> None:
    value = ImageData.frombytes(image_data(PLANES, compression, 2), header)
    assert value.compression == compression
    assert value.planes == PLANES


def test_image_data_zip(header: FileHeader) -> None:
    data = pack("H", Compression.ZIP) + zlib.compress(b"".join(PLANES))
    value = ImageData.frombytes(data, header)
    assert value.planes == PLANES


def test_image_data_16bit() -> None:
    header = FileHeader(channels=1, height=1, width=2, depth=16, color_mode=1)
    value = ImageData.frombytes(image_data([b"\x12\x34\x56\x78"], 1, 4), header)
    assert value.planes == [b"\x12\x34\x56\x78"]


def test_image_data_1bit() -> None:
    header = FileHeader(channels=1, height=2, width=3, depth=1, color_mode=0)
    value = ImageData.frombytes(pack("H", 0) + b"\xa0\x40", header)
    assert value.planes == [b"\x00\xff\x00\xff\x00\xff"]


def test_image_data_truncated(header: FileHeader) -> None:
    with pytest.raises(UnexpectedEOF):
        ImageData.frombytes(image_data(PLANES)[:-1], header)
