"""
File header structure.
"""

import logging
from typing import Any, TypeVar

from attrs import define, field

from psd_layout.constants import ColorMode
from psd_layout.errors import InvalidHeader, InvalidSignature, UnsupportedVersion
from psd_layout.psd.base import BaseElement
from psd_layout.psd.bin_utils import ByteReader, read_fmt
from psd_layout.validators import in_, range_

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="FileHeader")


@define(repr=True)
class FileHeader(BaseElement):
    """
    Header section of the PSD file.

    Example::

        from psd_layout.psd.header import FileHeader
        from psd_layout.constants import ColorMode

        header = FileHeader(channels=2, height=359, width=400, depth=8,
                            color_mode=ColorMode.GRAYSCALE)

    .. py:attribute:: signature

        Signature: always equal to ``b'8BPS'``.

    .. py:attribute:: version

        Version number. Only PSD (1) is supported.

    .. py:attribute:: channels

        The number of channels in the image, including any user-defined alpha
        channel.

    .. py:attribute:: height

        The height of the image in pixels.

    .. py:attribute:: width

        The width of the image in pixels.

    .. py:attribute:: depth

        The number of bits per channel.

    .. py:attribute:: color_mode

        The color mode of the file. See
        :py:class:`~psd_layout.constants.ColorMode`
    """

    SIGNATURE = b"8BPS"
    _FORMAT = "H6xHIIHH"

    signature: bytes = field(default=SIGNATURE, repr=False)
    version: int = field(default=1, validator=in_((1,)))
    channels: int = field(default=4, validator=range_(1, 24))
    height: int = field(default=64, validator=range_(1, 30000))
    width: int = field(default=64, validator=range_(1, 30000))
    depth: int = field(default=8, validator=in_((1, 8, 16)))
    color_mode: ColorMode = field(
        default=ColorMode.RGB, converter=ColorMode, validator=in_(ColorMode)
    )

    @classmethod
    def read(cls: type[T], fp: ByteReader, **kwargs: Any) -> T:
        signature = fp.read(4)
        if signature != cls.SIGNATURE:
            raise InvalidSignature("This is not a PSD file: %r" % signature)
        version, channels, height, width, depth, color_mode = read_fmt(
            cls._FORMAT, fp
        )
        if version != 1:
            raise UnsupportedVersion("Unsupported PSD version %d" % version)
        try:
            return cls(signature, version, channels, height, width, depth, color_mode)
        except ValueError as e:
            raise InvalidHeader("Invalid file header: %s" % e) from e
