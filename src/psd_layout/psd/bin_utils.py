"""
Binary reading utilities for PSD file parsing.

All reads go through :py:class:`ByteReader`, a big-endian cursor over an
immutable ``bytes`` buffer. It also behaves like a minimal read-only file
object (``read``, ``tell``, ``seek``), so structure classes take it as ``fp``.

Integers are composed from the raw bytes in host (little-endian) order and
converted with :py:func:`swap_bytes16` / :py:func:`swap_bytes32` /
:py:func:`swap_bytes64`, which only use shifts and masks.

Key functions:

- :py:func:`read_fmt`: Read typed values following a struct-like format
- :py:func:`read_length_block`: Read a length-prefixed block of data
- :py:func:`read_pascal_string`: Read a padded Pascal string
- :py:func:`read_unicode_string`: Read a UTF-16BE string with a count prefix

Example usage::

    from psd_layout.psd.bin_utils import ByteReader, read_fmt

    fp = ByteReader(data)
    top, left, bottom, right, num_channels = read_fmt("4iH", fp)
"""

import logging
import re
from typing import Any, Callable

from psd_layout.errors import UnexpectedEOF

logger = logging.getLogger(__name__)

_FORMAT_TOKEN = re.compile(r"(\d*)([bBhHiIqQ?sx])")
_FLOAT_TERMINATORS = b" \t\r\n]"
_WHITESPACE = b" \t\r\n"


def swap_bytes16(value: int) -> int:
    return ((value & 0x00FF) << 8) | ((value >> 8) & 0x00FF)


def swap_bytes32(value: int) -> int:
    return (
        ((value & 0x000000FF) << 24)
        | ((value & 0x0000FF00) << 8)
        | ((value >> 8) & 0x0000FF00)
        | ((value >> 24) & 0x000000FF)
    )


def swap_bytes64(value: int) -> int:
    return (swap_bytes32(value & 0xFFFFFFFF) << 32) | swap_bytes32(
        (value >> 32) & 0xFFFFFFFF
    )


def _to_signed(value: int, bits: int) -> int:
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


class ByteReader:
    """
    Sequential big-endian reader over a byte buffer.

    Reading past the end of the buffer raises
    :py:class:`~psd_layout.errors.UnexpectedEOF`. The only lenient methods are
    the descriptor helpers (:py:meth:`read_descriptor_float`,
    :py:meth:`read_descriptor_string`) and :py:meth:`seek_to`, which never
    raise.

    :param data: bytes to read.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return "ByteReader(pos=%d, size=%d)" % (self._pos, len(self._data))

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def tell(self) -> int:
        return self._pos

    def seek(self, offset: int, whence: int = 0) -> int:
        if whence == 1:
            offset += self._pos
        elif whence == 2:
            offset += len(self._data)
        self._pos = max(0, min(offset, len(self._data)))
        return self._pos

    def is_readable(self, size: int = 1) -> bool:
        return self.remaining >= size

    def peek(self, size: int = 1) -> bytes:
        return self._data[self._pos : self._pos + size]

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = self.remaining
        if size > self.remaining:
            raise UnexpectedEOF(
                "Failed to read %d bytes at %d, %d bytes left"
                % (size, self._pos, self.remaining)
            )
        data = self._data[self._pos : self._pos + size]
        self._pos += size
        return data

    read_bytes = read

    def skip(self, size: int) -> None:
        self.read(size)

    def _read_host_order(self, size: int) -> int:
        value = 0
        for shift, byte in enumerate(self.read(size)):
            value |= byte << (8 * shift)
        return value

    def read_u8(self) -> int:
        return self._read_host_order(1)

    def read_i8(self) -> int:
        return _to_signed(self.read_u8(), 8)

    def read_u16(self) -> int:
        return swap_bytes16(self._read_host_order(2))

    def read_i16(self) -> int:
        return _to_signed(self.read_u16(), 16)

    def read_u32(self) -> int:
        return swap_bytes32(self._read_host_order(4))

    def read_i32(self) -> int:
        return _to_signed(self.read_u32(), 32)

    def read_u64(self) -> int:
        return swap_bytes64(self._read_host_order(8))

    def read_i64(self) -> int:
        return _to_signed(self.read_u64(), 64)

    def read_pascal_string(self, encoding: str = "macroman", padding: int = 2) -> str:
        """
        Read a length-prefixed string and skip the padding so that the whole
        record, length byte included, is a multiple of ``padding`` bytes.
        """
        length = self.read_u8()
        data = self.read(length)
        self.skip(_padding_size(length + 1, padding))
        return data.decode(encoding, "replace")

    def read_unicode_string(self) -> str:
        """
        Read a u32 code unit count followed by UTF-16BE code units. Trailing
        NUL characters are stripped.
        """
        count = self.read_u32()
        data = self.read(count * 2)
        return data.decode("utf-16-be", "replace").rstrip("\x00")

    def seek_to(self, pattern: bytes) -> bool:
        """
        Move the cursor just past the next occurrence of ``pattern``.

        When the pattern is not found, the cursor is left at the end of the
        data and ``False`` is returned.
        """
        index = self._data.find(pattern, self._pos)
        if index < 0:
            self._pos = len(self._data)
            return False
        self._pos = index + len(pattern)
        return True

    def read_descriptor_float(self) -> float:
        """
        Read an ASCII float from text engine data. The terminating byte is
        left unread. Returns 0.0 for empty or malformed input.
        """
        while self.peek() == b" ":
            self._pos += 1
        start = self._pos
        while self._pos < len(self._data):
            if self._data[self._pos] in _FLOAT_TERMINATORS:
                break
            self._pos += 1
        token = self._data[start : self._pos]
        try:
            return float(token.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            return 0.0

    def read_descriptor_string(self, encoding: str = "macroman") -> str:
        """
        Read a parenthesized string from text engine data, such as
        ``(\\xfe\\xff\\x00H\\x00i)``. Backslash escapes are resolved. Strings
        with a byte order mark are UTF-16BE. Returns an empty string for
        malformed or unterminated input.
        """
        while self.peek() and self.peek() in _WHITESPACE:
            self._pos += 1
        if self.peek() != b"(":
            return ""
        self._pos += 1

        is_utf16 = self.peek(2) == b"\xfe\xff"
        if is_utf16:
            self._pos += 2

        value = bytearray()
        while self._pos < len(self._data):
            byte = self._data[self._pos]
            self._pos += 1
            if byte == 0x5C:  # backslash
                if self._pos >= len(self._data):
                    break
                value.append(self._data[self._pos])
                self._pos += 1
            elif byte == 0x29:  # closing parenthesis
                if is_utf16:
                    return bytes(value).decode("utf-16-be", "replace")
                return bytes(value).decode(encoding, "replace")
            else:
                value.append(byte)
        logger.debug("unterminated descriptor string at %d" % self._pos)
        return ""


_READERS: dict[str, Callable[[ByteReader], Any]] = {
    "b": ByteReader.read_i8,
    "B": ByteReader.read_u8,
    "h": ByteReader.read_i16,
    "H": ByteReader.read_u16,
    "i": ByteReader.read_i32,
    "I": ByteReader.read_u32,
    "q": ByteReader.read_i64,
    "Q": ByteReader.read_u64,
    "?": lambda fp: bool(fp.read_u8()),
}


def _padding_size(size: int, divisor: int) -> int:
    remainder = size % divisor
    if remainder:
        return divisor - remainder
    return 0


def read_fmt(fmt: str, fp: ByteReader) -> tuple:
    """
    Reads data from ``fp`` according to ``fmt``.

    ``fmt`` is a big-endian struct-like format without the byte order prefix.
    Supported codes are ``b B h H i I q Q ?`` for integers, ``Ns`` for
    ``N`` raw bytes and ``Nx`` for ``N`` skipped bytes.
    """
    values: list = []
    for count, code in _FORMAT_TOKEN.findall(fmt):
        number = int(count) if count else 1
        if code == "s":
            values.append(fp.read(number))
        elif code == "x":
            fp.skip(number)
        else:
            reader = _READERS[code]
            values.extend(reader(fp) for _ in range(number))
    return tuple(values)


def read_length_block(fp: ByteReader, fmt: str = "I", padding: int = 1) -> bytes:
    """
    Read a block of data with a length marker at the beginning.

    :param fp: reader
    :param fmt: format of the length marker
    :param padding: divisor of the block alignment
    :return: bytes object
    """
    length = read_fmt(fmt, fp)[-1]
    data = fp.read(length)
    read_padding(fp, length, padding)
    return data


def read_padding(fp: ByteReader, size: int, divisor: int = 2) -> bytes:
    """
    Read padding bytes for the given byte size.

    :param fp: reader
    :param divisor: divisor of the byte alignment
    :return: padding bytes
    """
    return fp.read(_padding_size(size, divisor))


def read_pascal_string(
    fp: ByteReader, encoding: str = "macroman", padding: int = 2
) -> str:
    return fp.read_pascal_string(encoding, padding)


def read_unicode_string(fp: ByteReader) -> str:
    return fp.read_unicode_string()


def is_readable(fp: ByteReader, size: int = 1) -> bool:
    """
    Check if the reader has at least ``size`` bytes left.
    """
    return fp.is_readable(size)


def decode_fixed_point_32bit(value: int) -> float:
    """Decode a 16.16 fixed point number."""
    return value / 65536.0


def trimmed_repr(data: bytes, maxlen: int = 16) -> str:
    if len(data) > maxlen:
        return "%s ... =%d" % (repr(data[:maxlen]), len(data))
    return repr(data)
