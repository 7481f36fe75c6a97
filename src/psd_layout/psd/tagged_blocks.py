"""
Tagged block data structure, the extra data records of a layer.

Each record is ``signature (4) | key (4) | length (u32) | data``. Keys
registered in :py:data:`TYPES` are decoded, all the others keep their raw
bytes. See :py:class:`~psd_layout.constants.Tag` for the known keys.

A failing record does not abort the document. :py:meth:`TaggedBlock.try_read`
returns any error raised while reading the record, and :py:meth:`TaggedBlocks.read` logs it and stops reading
the remaining records of the layer; the layer record reader then seeks to the
declared end of the extra data.
"""

import logging
from typing import Any, Optional, TypeVar

from attrs import define, field

from psd_layout.constants import SectionDivider, Tag
from psd_layout.errors import InvalidSignature, UnexpectedEOF
from psd_layout.psd.base import BaseElement, IntegerElement, ListElement, StringElement
from psd_layout.psd.bin_utils import ByteReader, read_fmt
from psd_layout.registry import new_registry

logger = logging.getLogger(__name__)

T_TaggedBlocks = TypeVar("T_TaggedBlocks", bound="TaggedBlocks")
T_TaggedBlock = TypeVar("T_TaggedBlock", bound="TaggedBlock")

TYPES, register = new_registry()

TAGGED_BLOCK_SIGNATURES = (b"8BIM", b"8B64")


@define(repr=False)
class TaggedBlocks(ListElement):
    """
    List of :py:class:`.TaggedBlock` in file order.

    Example::

        from psd_layout.constants import Tag

        # Check if a block exists
        if Tag.TYPE_TOOL_OBJECT_SETTING in tagged_blocks:
            print('Text layer')

        # Get the decoded data
        layer_id = tagged_blocks.get_data(Tag.LAYER_ID)
    """

    def get(self, key: Any) -> Optional["TaggedBlock"]:
        """Get the first block of the given key."""
        for item in self:
            if item.key == key:
                return item
        return None

    def get_data(self, key: Any, default: Any = None) -> Any:
        """
        Get data from the tagged blocks.

        Shortcut for the following::

            if key in tagged_blocks:
                value = tagged_blocks.get(key).data
        """
        item = self.get(key)
        if item is None:
            return default
        if isinstance(item.data, (IntegerElement, StringElement)):
            return item.data.value
        return item.data

    def keys(self) -> list:
        return [item.key for item in self]

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    @classmethod
    def read(
        cls: type[T_TaggedBlocks], fp: ByteReader, end_pos: int, **kwargs: Any
    ) -> T_TaggedBlocks:
        items = []
        while fp.tell() + 12 <= end_pos:
            result = TaggedBlock.try_read(fp, end_pos, **kwargs)
            if not result.ok:
                logger.warning(
                    "Failed to read tagged block at %d: %s" % (fp.tell(), result.error)
                )
                break
            items.append(result.block)
        fp.seek(end_pos)
        return cls(items)  # type: ignore[arg-type]


@define
class ReadResult:
    """
    Outcome of :py:meth:`TaggedBlock.try_read`, either a block or an error.
    """

    block: Optional["TaggedBlock"] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@define(repr=False)
class TaggedBlock(BaseElement):
    """
    Layer tagged block with extra info.

    .. py:attribute:: key

        4-character code. See :py:class:`~psd_layout.constants.Tag`

    .. py:attribute:: data

        Data.
    """

    signature: bytes = field(default=b"8BIM", repr=False)
    key: Any = b""
    data: Any = b""

    @classmethod
    def try_read(
        cls, fp: ByteReader, end_pos: int, **kwargs: Any
    ) -> ReadResult:
        try:
            return ReadResult(block=cls.read(fp, end_pos=end_pos, **kwargs))
        except Exception as e:
            return ReadResult(error=e)

    @classmethod
    def read(
        cls: type[T_TaggedBlock],
        fp: ByteReader,
        end_pos: Optional[int] = None,
        padding: int = 1,
        **kwargs: Any,
    ) -> T_TaggedBlock:
        signature, key, length = read_fmt("4s4sI", fp)
        if signature not in TAGGED_BLOCK_SIGNATURES:
            raise InvalidSignature("Invalid signature (%r)" % (signature))
        if end_pos is not None and fp.tell() + length > end_pos:
            raise UnexpectedEOF(
                "Tagged block %r overruns the record: %d > %d"
                % (key, fp.tell() + length, end_pos)
            )

        try:
            key = Tag(key)
        except ValueError:
            logger.info("Unknown tagged block %r" % (key))

        raw_data = fp.read(length)
        if padding > 1:
            pad_end = fp.tell() + (-length % padding)
            fp.seek(pad_end if end_pos is None else min(pad_end, end_pos))

        kls = TYPES.get(key)
        if kls is not None:
            data = kls.frombytes(raw_data, **kwargs)
        else:
            data = raw_data
        return cls(signature, key, data)

    def __repr__(self) -> str:
        return "TaggedBlock(%s)" % getattr(self.key, "name", repr(self.key))


@register(Tag.UNICODE_LAYER_NAME)
@define(repr=False, eq=False, order=False)
class UnicodeLayerName(StringElement):
    """
    Unicode layer name. A u32 count of UTF-16BE code units followed by the
    code units.
    """


@register(Tag.LAYER_ID)
@define(repr=False, eq=False, order=False)
class LayerID(IntegerElement):
    """
    Layer ID.
    """


@register(Tag.SECTION_DIVIDER_SETTING)
@register(Tag.NESTED_SECTION_DIVIDER_SETTING)
@define(repr=False)
class SectionDividerSetting(BaseElement):
    """
    SectionDividerSetting structure.

    .. py:attribute:: kind

        See :py:class:`~psd_layout.constants.SectionDivider`.

    .. py:attribute:: blend_mode

        Blend mode key of the group, or None.

    .. py:attribute:: sub_type

        0 = normal, 1 = scene group; None when absent.
    """

    kind: SectionDivider = field(default=SectionDivider.OTHER, converter=SectionDivider)
    blend_mode: Optional[bytes] = None
    sub_type: Optional[int] = None

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "SectionDividerSetting":
        kind = fp.read_u32()
        blend_mode, sub_type = None, None
        if fp.is_readable(8):
            signature, blend_mode = read_fmt("4s4s", fp)
            if signature != b"8BIM":
                raise InvalidSignature("Invalid signature (%r)" % (signature))
        if fp.is_readable(4):
            sub_type = fp.read_u32()
        return cls(kind, blend_mode, sub_type)

    def __repr__(self) -> str:
        return "SectionDividerSetting(%s)" % self.kind.name
