"""
Apple PackBits RLE codec for PSD channel rows.

Each packet starts with a header byte:

- Values 0-127: Copy the next (n+1) literal bytes
- Values 129-255: Repeat the next byte (257-n) times
- Value 128: No-op

Encoding example::

    Input:  [A, A, A, B, C, C, C, C]
    Output: [254, A, 0, B, 253, C]

Functions:

- :py:func:`decode_row`: Decode one row from a reader into an output buffer
- :py:func:`decode`: Decode a packed row to bytes
- :py:func:`encode`: Pack raw bytes

Example usage::

    from psd_layout.compression.rle import encode, decode

    raw_data = b'\\x00' * 100 + b'\\xff' * 50
    assert decode(encode(raw_data), len(raw_data)) == raw_data
"""

from psd_layout.psd.bin_utils import ByteReader

MAX_RUN = 128


def decode_row(fp: ByteReader, output: bytearray, offset: int, columns: int) -> int:
    """
    Decode packets from ``fp`` into ``output[offset:offset + columns]``.

    Decoding stops as soon as ``columns`` bytes are written, even in the
    middle of a packet. Literal bytes that do not fit are still consumed so
    the reader stays aligned to the packet boundary.

    :return: number of bytes written.
    """
    written = 0
    while written < columns:
        header = fp.read_u8()
        if header < 128:
            literal = fp.read(header + 1)
            size = min(len(literal), columns - written)
            output[offset + written : offset + written + size] = literal[:size]
            written += size
        elif header > 128:
            value = fp.read_u8()
            size = min(257 - header, columns - written)
            output[offset + written : offset + written + size] = bytes((value,)) * size
            written += size
    return written


def decode(data: bytes, size: int) -> bytes:
    """decode(data, size) -> bytes

    Decode a single packed row of ``size`` bytes.
    """
    result = bytearray(size)
    decode_row(ByteReader(data), result, 0, size)
    return bytes(result)


def encode(data: bytes) -> bytes:
    """encode(data) -> bytes

    Pack ``data``. Runs of two or more identical bytes become repeat packets,
    everything else goes into literal packets of at most 128 bytes.
    """
    result = bytearray()
    literal = bytearray()
    length = len(data)
    i = 0

    while i < length:
        run = 1
        while i + run < length and run < MAX_RUN and data[i + run] == data[i]:
            run += 1

        if run >= 2:
            _flush_literal(result, literal)
            result.extend((257 - run, data[i]))
            i += run
        else:
            literal.append(data[i])
            if len(literal) == MAX_RUN:
                _flush_literal(result, literal)
            i += 1

    _flush_literal(result, literal)
    return bytes(result)


def _flush_literal(result: bytearray, literal: bytearray) -> None:
    if literal:
        result.append(len(literal) - 1)
        result.extend(literal)
        literal.clear()
