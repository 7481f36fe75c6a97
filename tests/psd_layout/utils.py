"""
Builders of synthetic PSD byte streams.

Everything is packed with :py:mod:`struct` so that fixtures do not depend on
the code under test.
"""

import logging
import struct
from typing import Iterable, Optional, Sequence

logging.basicConfig(level=logging.DEBUG)


def pack(fmt: str, *args) -> bytes:
    return struct.pack(">" + fmt, *args)


def pad_to(data: bytes, divisor: int) -> bytes:
    remainder = len(data) % divisor
    if remainder:
        data += b"\x00" * (divisor - remainder)
    return data


def pascal_string(value: bytes, padding: int = 2) -> bytes:
    return pad_to(pack("B", len(value)) + value, padding)


def unicode_string(value: str) -> bytes:
    data = value.encode("utf-16-be")
    return pack("I", len(data) // 2) + data


def length_block(data: bytes) -> bytes:
    return pack("I", len(data)) + data


def header(
    channels: int = 3,
    height: int = 2,
    width: int = 2,
    depth: int = 8,
    color_mode: int = 3,
    version: int = 1,
    signature: bytes = b"8BPS",
) -> bytes:
    return signature + pack("H6xHIIHH", version, channels, height, width, depth, color_mode)


def resource(key: int, data: bytes, name: bytes = b"", signature: bytes = b"8BIM") -> bytes:
    return (
        signature
        + pack("H", key)
        + pascal_string(name, 2)
        + pack("I", len(data))
        + pad_to(data, 2)
    )


def tagged_block(key: bytes, data: bytes, signature: bytes = b"8BIM") -> bytes:
    return signature + key + pack("I", len(data)) + data


def mask_data(
    top: int,
    left: int,
    bottom: int,
    right: int,
    background_color: int = 0,
    flags: int = 0,
    real: Optional[tuple] = None,
) -> bytes:
    data = pack("4iBB", top, left, bottom, right, background_color, flags)
    if real is None:
        return data + b"\x00\x00"
    real_flags, real_background, real_top, real_left, real_bottom, real_right = real
    return data + pack(
        "BB4i", real_flags, real_background, real_top, real_left, real_bottom, real_right
    )


def raw_channel(pixels: bytes) -> bytes:
    return pack("H", 0) + pixels


def rle_rows(rows: Sequence[bytes]) -> bytes:
    """Pack each row as a single literal packet, preceded by the counts table."""
    packed = [pack("B", len(row) - 1) + row for row in rows]
    return b"".join(pack("H", len(row)) for row in packed) + b"".join(packed)


def rle_channel(rows: Sequence[bytes]) -> bytes:
    return pack("H", 1) + rle_rows(rows)


def layer(
    name: bytes,
    bbox: tuple = (0, 0, 0, 0),
    channels: Iterable[tuple] = (),
    blend_mode: bytes = b"norm",
    opacity: int = 255,
    clipping: int = 0,
    flags: int = 0,
    mask: bytes = b"",
    blocks: bytes = b"",
    signature: bytes = b"8BIM",
) -> tuple[bytes, bytes]:
    """
    Build a layer record and its channel image data.

    :param bbox: (top, left, bottom, right).
    :param channels: (channel id, encoded channel data) pairs, see
        :py:func:`raw_channel` and :py:func:`rle_channel`.
    :return: (record bytes, channel data bytes)
    """
    channels = list(channels)
    extra = length_block(mask) + length_block(b"") + pascal_string(name, 4) + blocks
    record = (
        pack("4iH", *bbox, len(channels))
        + b"".join(pack("hI", channel_id, len(data)) for channel_id, data in channels)
        + signature
        + blend_mode
        + pack("BBBx", opacity, clipping, flags)
        + length_block(extra)
    )
    return record, b"".join(data for _, data in channels)


def layer_info(layers: Sequence[tuple[bytes, bytes]], count: Optional[int] = None) -> bytes:
    return length_block(layer_info_block(layers, count, padding=2))


def layer_info_block(
    layers: Sequence[tuple[bytes, bytes]],
    count: Optional[int] = None,
    padding: int = 4,
) -> bytes:
    """Layer info without its length field, the payload of ``Lr16``."""
    if count is None:
        count = len(layers)
    body = pack("h", count)
    body += b"".join(record for record, _ in layers)
    body += b"".join(data for _, data in layers)
    return pad_to(body, padding)


def layer_and_mask(info: bytes = b"", global_mask: bytes = b"", blocks: bytes = b"") -> bytes:
    if not info and not global_mask and not blocks:
        return pack("I", 0)
    return length_block(info + length_block(global_mask) + blocks)


def image_data(planes: Sequence[bytes], compression: int = 0, width: int = 2) -> bytes:
    if compression == 0:
        return pack("H", 0) + b"".join(planes)
    rows = [plane[i : i + width] for plane in planes for i in range(0, len(plane), width)]
    return pack("H", 1) + rle_rows(rows)


def make_psd(
    width: int = 2,
    height: int = 2,
    channels: int = 3,
    depth: int = 8,
    color_mode: int = 3,
    color_mode_data: bytes = b"",
    resources: bytes = b"",
    layers: bytes = b"",
    planes: Optional[Sequence[bytes]] = None,
    compression: int = 0,
) -> bytes:
    if planes is None:
        plane_size = height * (width * depth // 8 if depth >= 8 else (width + 7) // 8)
        planes = [b"\x00" * plane_size] * channels
    return (
        header(channels, height, width, depth, color_mode)
        + length_block(color_mode_data)
        + length_block(resources)
        + (layers or layer_and_mask())
        + image_data(planes, compression, width * max(depth // 8, 1))
    )


TEXT_ENGINE_DATA = (
    b"\x00\x00\x00\x10TxLr..."
    b"<< /EngineDict << /Editor << /Text (\xfe\xff\x00H\x00i\x00\\)\x00!\x00\r) >>"
    b" /ParagraphRun << /RunArray [ << /ParagraphSheet << /Properties <<"
    b" /Justification 2 >> >> >> ] >>"
    b" /StyleRun << /RunArray [ << /StyleSheet << /StyleSheetData <<"
    b" /Font 0 /FontSize 24.5\n /FillColor << /Type 1 /Values [ 1.0 0.5 0.25 0.0 ] >>"
    b" >> >> >> ] >> >>"
    b" /ResourceDict << /FontSet [ << /Name (\xfe\xff\x00A\x00r\x00i\x00a\x00l) /Script 0 >> ] >>"
    b" >>"
    b"\x00\x00\x00\x00warpStyleenum\x00\x00\x00\x00warpStyle"
    b"\x00\x00\x00\x08warpArch"
)
