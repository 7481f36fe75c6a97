"""
Image compression utilities for PSD channel data.

Supported compression methods:

- **RAW** (``Compression.RAW``): Uncompressed raw pixel data
- **RLE** (``Compression.RLE``): Apple PackBits run-length encoding
- **ZIP** (``Compression.ZIP``): ZIP/Deflate compression without prediction
- **ZIP_WITH_PREDICTION** (``Compression.ZIP_WITH_PREDICTION``): ZIP with delta encoding

Decompressed planes have ``height`` rows of ``width`` bytes (8 and 1 bit) or
``width * 2`` bytes (16 bit, big-endian). 1-bit rows are stored packed and are
expanded to one byte per pixel, 0 for black and 255 for white.

Example usage::

    from psd_layout.compression import decompress
    from psd_layout.constants import Compression

    pixels = decompress(
        data=compressed,
        compression=Compression.RLE,
        width=100,
        height=100,
        depth=8,
    )
"""

import logging
import zlib

import numpy as np

from psd_layout.compression import rle
from psd_layout.constants import Compression
from psd_layout.errors import PSDFormatError, UnexpectedEOF
from psd_layout.psd.bin_utils import ByteReader

logger = logging.getLogger(__name__)


def row_size(width: int, depth: int) -> int:
    """Stored byte size of a single row."""
    if depth == 1:
        return (width + 7) // 8
    return width * depth // 8


def decompress(
    data: bytes,
    compression: Compression,
    width: int,
    height: int,
    depth: int,
) -> bytes:
    """Decompress channel data.

    :param data: compressed data bytes, without the compression marker.
    :param compression: compression type,
            see :py:class:`~psd_layout.constants.Compression`.
    :param width: width.
    :param height: number of rows.
    :param depth: bit depth of the pixel.
    :return: decompressed data bytes.
    :raise UnexpectedEOF: when the data is truncated.
    """
    if width <= 0 or height <= 0:
        return b""

    columns = row_size(width, depth)
    length = columns * height

    if compression == Compression.RAW:
        if len(data) < length:
            raise UnexpectedEOF(
                "Raw channel data is truncated: %d < %d" % (len(data), length)
            )
        result = data[:length]
    elif compression == Compression.RLE:
        result = decode_rle(data, columns, height)
    elif compression == Compression.ZIP:
        result = _inflate(data, length)
    elif compression == Compression.ZIP_WITH_PREDICTION:
        result = decode_prediction(_inflate(data, length), width, height, depth)
    else:
        raise PSDFormatError("Unknown compression %r" % compression)

    if depth == 1:
        return expand_bits(result, width, height)
    return result


def decode_rle(data: bytes, columns: int, height: int) -> bytes:
    """
    Decode RLE rows. The row byte counts table comes first, then the packed
    rows. The reader is realigned to each row's declared end.
    """
    fp = ByteReader(data)
    bytes_counts = [fp.read_u16() for _ in range(height)]
    result = bytearray(columns * height)
    for row, count in enumerate(bytes_counts):
        start = fp.tell()
        rle.decode_row(fp, result, row * columns, columns)
        fp.seek(start + count)
    return bytes(result)


def _inflate(data: bytes, length: int) -> bytes:
    try:
        result = zlib.decompress(data)
    except zlib.error as e:
        raise PSDFormatError("Invalid ZIP channel data: %s" % e) from e
    if len(result) < length:
        raise UnexpectedEOF(
            "ZIP channel data is truncated: %d < %d" % (len(result), length)
        )
    return result[:length]


def decode_prediction(data: bytes, width: int, height: int, depth: int) -> bytes:
    """Undo the horizontal delta encoding of ZIP with prediction."""
    if depth == 8:
        arr = np.frombuffer(data, dtype=np.uint8).reshape((height, width))
        return np.cumsum(arr, axis=1, dtype=np.uint8).tobytes()
    elif depth == 16:
        arr = np.frombuffer(data, dtype=">u2").reshape((height, width))
        decoded = np.cumsum(arr, axis=1, dtype=np.uint16)
        return decoded.astype(">u2").tobytes()
    raise PSDFormatError("Invalid pixel size %d for prediction" % depth)


def expand_bits(data: bytes, width: int, height: int) -> bytes:
    """Expand packed 1-bit rows, where a set bit is black."""
    packed = np.frombuffer(data, dtype=np.uint8).reshape((height, -1))
    bits = np.unpackbits(packed, axis=1)[:, :width]
    return ((1 - bits) * 255).astype(np.uint8).tobytes()
