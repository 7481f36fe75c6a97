"""
Layer and mask data structures.

This module implements the "Layer and Mask Information" section of PSD files.

Key classes:

- :py:class:`LayerAndMaskInformation`: Top-level container for all layer data
- :py:class:`LayerInfo`: Layer records and their decoded channel data
- :py:class:`LayerRecord`: Single layer metadata (name, bounds, blend mode, etc.)
- :py:class:`ChannelInfo`: Channel id and length within a layer record
- :py:class:`ChannelData`: Single channel's compressed and decoded pixel data
- :py:class:`MaskData`: Layer mask parameters

Each layer record contains, in file order:

1. **Metadata**: Rectangle bounds, channel list, blend mode, opacity, flags
2. **Mask data**: Layer mask rectangle and flags, possibly empty
3. **Blend ranges**: Kept as raw bytes
4. **Layer name**: Pascal string padded to 4 bytes
5. **Tagged blocks**: Extra data records, see :py:mod:`psd_layout.psd.tagged_blocks`

The channel image data follows all layer records, in record order and in the
channel order of each record. Channel pixels are decompressed while reading,
so a truncated channel is a fatal
:py:class:`~psd_layout.errors.UnexpectedEOF`.

Example of reading layer metadata::

    from psd_layout.psd import PSD

    psd = PSD.frombytes(data)
    layer_info = psd.layer_and_mask_information.layer_info
    for record in layer_info.layer_records:
        print(record.name, record.top, record.left, record.bottom, record.right)
"""

import logging
from typing import Any, Optional, TypeVar

from attrs import define, field

from psd_layout.compression import decompress
from psd_layout.constants import (
    BlendMode,
    ChannelID,
    Clipping,
    Compression,
    LayerFlag,
    MaskFlag,
    SectionDivider,
    Tag,
)
from psd_layout.errors import InvalidSignature
from psd_layout.psd import type_tool  # noqa: F401
from psd_layout.psd.base import BaseElement
from psd_layout.psd.bin_utils import (
    ByteReader,
    read_fmt,
    read_length_block,
    read_pascal_string,
)
from psd_layout.psd.tagged_blocks import TaggedBlocks, register
from psd_layout.validators import in_, range_

logger = logging.getLogger(__name__)

T_LayerAndMaskInformation = TypeVar(
    "T_LayerAndMaskInformation", bound="LayerAndMaskInformation"
)
T_LayerInfo = TypeVar("T_LayerInfo", bound="LayerInfo")
T_LayerRecord = TypeVar("T_LayerRecord", bound="LayerRecord")
T_MaskData = TypeVar("T_MaskData", bound="MaskData")
T_ChannelData = TypeVar("T_ChannelData", bound="ChannelData")


@define(repr=False)
class LayerAndMaskInformation(BaseElement):
    """
    Layer and mask information section.

    .. py:attribute:: layer_info

        See :py:class:`.LayerInfo`.

    .. py:attribute:: global_layer_mask_info

        Global layer mask info as raw bytes, or None.

    .. py:attribute:: tagged_blocks

        Records after the global layer mask, see :py:class:`.TaggedBlocks`.
        Photoshop stores the layers of 16 and 32 bits documents here, in
        ``Lr16`` and ``Lr32`` blocks, and leaves :py:attr:`layer_info` empty.
    """

    layer_info: Optional["LayerInfo"] = None
    global_layer_mask_info: Optional[bytes] = None
    tagged_blocks: Optional[TaggedBlocks] = None

    @classmethod
    def read(
        cls: type[T_LayerAndMaskInformation],
        fp: ByteReader,
        encoding: str = "macroman",
        depth: int = 8,
        **kwargs: Any,
    ) -> T_LayerAndMaskInformation:
        length = fp.read_u32()
        end_pos = fp.tell() + length
        logger.debug("reading layer and mask info, len=%d" % (length))
        if length == 0:
            return cls()

        layer_info, global_layer_mask_info, tagged_blocks = None, None, None
        if fp.tell() + 4 <= end_pos:
            layer_info = LayerInfo.read(fp, encoding, depth)
        if fp.tell() + 4 <= end_pos:
            global_layer_mask_info = read_length_block(fp)
            logger.debug(
                "reading global layer mask info, len=%d" % (len(global_layer_mask_info))
            )
        if fp.tell() + 12 <= end_pos:
            # Global tagged blocks align to 4 bytes.
            tagged_blocks = TaggedBlocks.read(
                fp, end_pos, padding=4, encoding=encoding, depth=depth
            )
        fp.seek(end_pos)
        return cls(layer_info, global_layer_mask_info, tagged_blocks)

    def get_layer_info(self) -> Optional["LayerInfo"]:
        """
        Layer info of the document: the regular one when it has layers,
        otherwise the one of an ``Lr16`` or ``Lr32`` block.
        """
        if self.layer_info is not None and self.layer_info.layer_records:
            return self.layer_info
        if self.tagged_blocks is not None:
            for key in (Tag.LAYER_16, Tag.LAYER_32):
                if key in self.tagged_blocks:
                    logger.debug("using layer info of %s block" % key.name)
                    return self.tagged_blocks.get_data(key)
        return self.layer_info


@define(repr=False)
class LayerInfo(BaseElement):
    """
    High-level layer info structure.

    .. py:attribute:: layer_count

        Layer count. If it is a negative number, its absolute value is the
        number of layers and the first alpha channel contains the transparency
        data for the merged result.

    .. py:attribute:: layer_records

        List of :py:class:`.LayerRecord`.

    .. py:attribute:: channel_image_data

        List of lists of :py:class:`.ChannelData`, one list per record.
    """

    layer_count: int = 0
    layer_records: list["LayerRecord"] = field(factory=list)
    channel_image_data: list[list["ChannelData"]] = field(factory=list)

    @property
    def absolute_alpha(self) -> bool:
        return self.layer_count < 0

    @classmethod
    def read(
        cls: type[T_LayerInfo],
        fp: ByteReader,
        encoding: str = "macroman",
        depth: int = 8,
        **kwargs: Any,
    ) -> T_LayerInfo:
        length = fp.read_u32()
        end_pos = fp.tell() + length
        logger.debug("reading layer info, len=%d" % (length))
        if length == 0:
            return cls()
        self = cls._read_body(fp, encoding, depth)
        fp.seek(end_pos)
        return self

    @classmethod
    def _read_body(
        cls: type[T_LayerInfo], fp: ByteReader, encoding: str, depth: int
    ) -> T_LayerInfo:
        layer_count = fp.read_i16()
        layer_records = [
            LayerRecord.read(fp, encoding) for _ in range(abs(layer_count))
        ]
        channel_image_data = [
            [
                ChannelData.read(fp, info, *record.channel_size(info.id), depth)
                for info in record.channel_info
            ]
            for record in layer_records
        ]
        logger.debug("read %d layers, end=%d" % (len(layer_records), fp.tell()))
        return cls(layer_count, layer_records, channel_image_data)

    def __repr__(self) -> str:
        return "%s(layer_count=%d)" % (self.__class__.__name__, self.layer_count)


@register(Tag.LAYER_16)
@register(Tag.LAYER_32)
@define(repr=False)
class LayerInfoBlock(LayerInfo):
    """
    Layer info of 16 and 32 bits documents, stored as a tagged block. The
    payload is the layer info without its length field.
    """

    @classmethod
    def read(
        cls: type[T_LayerInfo],
        fp: ByteReader,
        encoding: str = "macroman",
        depth: int = 16,
        **kwargs: Any,
    ) -> T_LayerInfo:
        if not fp.is_readable(2):
            return cls()
        return cls._read_body(fp, encoding, depth)


@define(repr=True)
class ChannelInfo(BaseElement):
    """
    Channel information.

    .. py:attribute:: id

        Channel type, see :py:class:`~psd_layout.constants.ChannelID`.

    .. py:attribute:: length

        Length of the corresponding channel data, compression marker
        included.
    """

    id: int = 0
    length: int = 0

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "ChannelInfo":
        id, length = read_fmt("hI", fp)
        try:
            id = ChannelID(id)
        except ValueError:
            logger.debug("Unknown channel id %d" % id)
        return cls(id, length)


@define(repr=False)
class ChannelData(BaseElement):
    """
    Channel data of a layer.

    .. py:attribute:: id

        Channel type, see :py:class:`~psd_layout.constants.ChannelID`.

    .. py:attribute:: length

        Declared length of the channel data.

    .. py:attribute:: compression

        Compression type. See :py:class:`~psd_layout.constants.Compression`.

    .. py:attribute:: data

        Compressed data.

    .. py:attribute:: pixels

        Decompressed pixel rows, ``height * width`` bytes for 1 and 8 bits and
        ``height * width * 2`` big-endian bytes for 16 bits.
    """

    id: int = 0
    length: int = 0
    compression: Compression = field(
        default=Compression.RAW, converter=Compression, validator=in_(Compression)
    )
    data: bytes = b""
    pixels: bytes = b""

    @classmethod
    def read(  # type: ignore[override]
        cls: type[T_ChannelData],
        fp: ByteReader,
        info: ChannelInfo,
        width: int,
        height: int,
        depth: int,
        **kwargs: Any,
    ) -> T_ChannelData:
        if info.length < 2:
            fp.skip(info.length)
            return cls(info.id, info.length)
        compression = fp.read_u16()
        data = fp.read(info.length - 2)
        pixels = decompress(data, Compression(compression), width, height, depth)
        return cls(info.id, info.length, compression, data, pixels)

    def __repr__(self) -> str:
        return "ChannelData(id=%d, compression=%s, len=%d)" % (
            self.id,
            self.compression.name,
            len(self.data),
        )


@define(repr=False)
class LayerRecord(BaseElement):
    """
    Layer record.

    .. py:attribute:: top

        Top position.

    .. py:attribute:: left

        Left position.

    .. py:attribute:: bottom

        Bottom position.

    .. py:attribute:: right

        Right position.

    .. py:attribute:: channel_info

        List of :py:class:`.ChannelInfo`.

    .. py:attribute:: signature

        Blend mode signature ``b'8BIM'``.

    .. py:attribute:: blend_mode

        Blend mode key, see :py:class:`~psd_layout.constants.BlendMode`.
        Unknown keys are kept as bytes.

    .. py:attribute:: opacity

        Opacity, 0 = transparent, 255 = opaque.

    .. py:attribute:: clipping

        Clipping, 0 = base, 1 = non-base. See
        :py:class:`~psd_layout.constants.Clipping`.

    .. py:attribute:: flags

        Bitmask of :py:class:`~psd_layout.constants.LayerFlag`.

    .. py:attribute:: mask_data

        :py:class:`.MaskData` or None.

    .. py:attribute:: blending_ranges

        Blending ranges as raw bytes.

    .. py:attribute:: name

        Layer name stored as Pascal string.

    .. py:attribute:: tagged_blocks

        See :py:class:`~psd_layout.psd.tagged_blocks.TaggedBlocks`.
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    channel_info: list[ChannelInfo] = field(factory=list)
    signature: bytes = field(default=b"8BIM", repr=False)
    blend_mode: Any = b"norm"
    opacity: int = field(default=255, validator=range_(0, 255))
    clipping: int = 0
    flags: int = 0
    mask_data: Optional["MaskData"] = None
    blending_ranges: bytes = b""
    name: str = ""
    tagged_blocks: TaggedBlocks = field(factory=TaggedBlocks)

    @classmethod
    def read(
        cls: type[T_LayerRecord],
        fp: ByteReader,
        encoding: str = "macroman",
        **kwargs: Any,
    ) -> T_LayerRecord:
        start_pos = fp.tell()
        top, left, bottom, right, num_channels = read_fmt("4iH", fp)
        channel_info = [ChannelInfo.read(fp) for _ in range(num_channels)]
        signature, blend_mode, opacity, clipping, flags = read_fmt("4s4sBBBx", fp)
        if signature != b"8BIM":
            raise InvalidSignature(
                "Invalid layer record signature %r at %d" % (signature, start_pos)
            )
        try:
            blend_mode = BlendMode(blend_mode)
        except ValueError:
            logger.info("Unknown blend mode %r" % (blend_mode))

        extra_length = fp.read_u32()
        end_pos = fp.tell() + extra_length
        mask_data = MaskData.read(fp)
        blending_ranges = read_length_block(fp)
        name = read_pascal_string(fp, encoding, padding=4)
        tagged_blocks = TaggedBlocks.read(fp, end_pos)
        fp.seek(end_pos)
        logger.debug("  read layer record %r, len=%d" % (name, fp.tell() - start_pos))

        return cls(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            channel_info=channel_info,
            signature=signature,
            blend_mode=blend_mode,
            opacity=opacity,
            clipping=clipping,
            flags=flags,
            mask_data=mask_data,
            blending_ranges=blending_ranges,
            name=name,
            tagged_blocks=tagged_blocks,
        )

    @property
    def width(self) -> int:
        """Width of the layer."""
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        """Height of the layer."""
        return max(self.bottom - self.top, 0)

    @property
    def visible(self) -> bool:
        return not self.flags & LayerFlag.HIDDEN

    @property
    def transparency_protected(self) -> bool:
        return bool(self.flags & LayerFlag.TRANSPARENCY_PROTECTED)

    @property
    def pixel_data_irrelevant(self) -> bool:
        return bool(self.flags & LayerFlag.PIXEL_DATA_IRRELEVANT)

    @property
    def clipping_base(self) -> bool:
        return self.clipping == Clipping.BASE

    @property
    def section_divider(self) -> Optional[SectionDivider]:
        for key in (Tag.SECTION_DIVIDER_SETTING, Tag.NESTED_SECTION_DIVIDER_SETTING):
            setting = self.tagged_blocks.get_data(key)
            if setting is not None:
                return setting.kind
        return None

    def channel_size(self, channel_id: int) -> tuple[int, int]:
        """
        Width and height of the given channel. User mask channels take the
        size of the corresponding mask rectangle.
        """
        if channel_id == ChannelID.USER_LAYER_MASK:
            if self.mask_data is None:
                return 0, 0
            return self.mask_data.width, self.mask_data.height
        elif channel_id == ChannelID.REAL_USER_LAYER_MASK:
            if self.mask_data is None or not self.mask_data.has_real:
                return 0, 0
            return self.mask_data.real_width, self.mask_data.real_height
        return self.width, self.height

    def __repr__(self) -> str:
        return "LayerRecord(%r, size=%dx%d)" % (self.name, self.width, self.height)


@define(repr=False)
class MaskData(BaseElement):
    """
    Mask data.

    Real user mask is a final composite mask of vector and pixel masks.

    .. py:attribute:: top

        Top position.

    .. py:attribute:: left

        Left position.

    .. py:attribute:: bottom

        Bottom position.

    .. py:attribute:: right

        Right position.

    .. py:attribute:: background_color

        Default color. 0 or 255.

    .. py:attribute:: flags

        Bitmask of :py:class:`~psd_layout.constants.MaskFlag`.

    .. py:attribute:: real_flags

        Real user mask flags, or None.

    .. py:attribute:: real_background_color

        Real user mask background. 0 or 255.

    .. py:attribute:: real_top
    .. py:attribute:: real_left
    .. py:attribute:: real_bottom
    .. py:attribute:: real_right
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    background_color: int = 0
    flags: int = 0
    real_flags: Optional[int] = None
    real_background_color: Optional[int] = None
    real_top: Optional[int] = None
    real_left: Optional[int] = None
    real_bottom: Optional[int] = None
    real_right: Optional[int] = None

    @classmethod
    def read(cls: type[T_MaskData], fp: ByteReader, **kwargs: Any) -> Optional[T_MaskData]:  # type: ignore[override]
        data = read_length_block(fp)
        if len(data) == 0:
            return None
        return cls._read_body(ByteReader(data), len(data))

    @classmethod
    def _read_body(cls: type[T_MaskData], fp: ByteReader, length: int) -> T_MaskData:
        top, left, bottom, right, background_color, flags = read_fmt("4iBB", fp)

        real_flags, real_background_color = None, None
        real_top, real_left, real_bottom, real_right = None, None, None, None
        if length >= 36:
            real_flags, real_background_color = read_fmt("BB", fp)
            real_top, real_left, real_bottom, real_right = read_fmt("4i", fp)

        return cls(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            background_color=background_color,
            flags=flags,
            real_flags=real_flags,
            real_background_color=real_background_color,
            real_top=real_top,
            real_left=real_left,
            real_bottom=real_bottom,
            real_right=real_right,
        )

    @property
    def width(self) -> int:
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        return max(self.bottom - self.top, 0)

    @property
    def has_real(self) -> bool:
        return self.real_flags is not None

    @property
    def real_width(self) -> int:
        return max((self.real_right or 0) - (self.real_left or 0), 0)

    @property
    def real_height(self) -> int:
        return max((self.real_bottom or 0) - (self.real_top or 0), 0)

    @property
    def relative(self) -> bool:
        """Whether the mask position is relative to the layer."""
        return bool(self.flags & MaskFlag.POS_RELATIVE_TO_LAYER)

    @property
    def disabled(self) -> bool:
        return bool(self.flags & MaskFlag.MASK_DISABLED)

    @property
    def inverted(self) -> bool:
        return bool(self.flags & MaskFlag.INVERT_MASK)

    def __repr__(self) -> str:
        return "MaskData(top=%d, left=%d, bottom=%d, right=%d)" % (
            self.top,
            self.left,
            self.bottom,
            self.right,
        )
