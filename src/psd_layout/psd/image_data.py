"""
Image data section structure.

:py:class:`.ImageData` holds the merged image of all layers, one plane per
channel, stored with a single compression method for the whole section.
"""

import logging
from typing import Any, TypeVar

from attrs import define, field

from psd_layout.compression import decompress
from psd_layout.constants import Compression
from psd_layout.psd.base import BaseElement
from psd_layout.psd.bin_utils import ByteReader
from psd_layout.psd.header import FileHeader
from psd_layout.validators import in_

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ImageData")


@define(repr=False)
class ImageData(BaseElement):
    """
    Merged channel image data.

    .. py:attribute:: compression

        See :py:class:`~psd_layout.constants.Compression`.

    .. py:attribute:: data

        `bytes` as compressed in the `compression` flag.

    .. py:attribute:: planes

        Decompressed planes, one `bytes` per channel in channel order.
    """

    compression: Compression = field(
        default=Compression.RAW, converter=Compression, validator=in_(Compression)
    )
    data: bytes = b""
    planes: list[bytes] = field(factory=list)

    @classmethod
    def read(  # type: ignore[override]
        cls: type[T], fp: ByteReader, header: FileHeader, **kwargs: Any
    ) -> T:
        start_pos = fp.tell()
        compression = Compression(fp.read_u16())
        data = fp.read()
        logger.debug("  read image data, len=%d" % (fp.tell() - start_pos))

        # RLE row counts of all the planes come first, so the whole section
        # decodes as a single image of height * channels rows.
        pixels = decompress(
            data,
            compression,
            header.width,
            header.height * header.channels,
            header.depth,
        )
        plane_size = len(pixels) // header.channels
        planes = [
            pixels[i * plane_size : (i + 1) * plane_size]
            for i in range(header.channels)
        ]
        return cls(compression, data, planes)

    def __repr__(self) -> str:
        return "ImageData(compression=%s, planes=%d)" % (
            self.compression.name,
            len(self.planes),
        )
