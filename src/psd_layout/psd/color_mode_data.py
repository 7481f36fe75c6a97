"""
Color mode data structure.
"""

import logging
from typing import Any, TypeVar

from attrs import define

from psd_layout.psd.base import ValueElement
from psd_layout.psd.bin_utils import ByteReader, read_length_block

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ColorModeData")


@define(repr=False, eq=False, order=False)
class ColorModeData(ValueElement):
    """
    Color mode data section of the PSD file.

    For indexed color images the data is the color table of 768 bytes, laid
    out as 256 red values, then 256 green values, then 256 blue values.
    Duotone images store opaque duotone specification bytes.
    """

    value: bytes = b""

    @classmethod
    def read(cls: type[T], fp: ByteReader, **kwargs: Any) -> T:
        value = read_length_block(fp)
        logger.debug("reading color mode data, len=%d" % (len(value)))
        return cls(value)  # type: ignore[call-arg]
