"""
Image resources section structure. Image resources are used to store non-pixel
data associated with images, such as resolution or thumbnails.

See :py:class:`~psd_layout.constants.Resource` to check the known resource
names. Resources registered in :py:data:`TYPES` are decoded into typed values,
all the others keep their raw bytes.

Example::

    from psd_layout.constants import Resource

    resolution = psd.image_resources.get_data(Resource.RESOLUTION_INFO)
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Optional, TypeVar

from attrs import define, field

from psd_layout.constants import Resource
from psd_layout.psd.base import BaseElement, ListElement, ValueElement
from psd_layout.psd.bin_utils import (
    ByteReader,
    decode_fixed_point_32bit,
    is_readable,
    read_fmt,
    read_length_block,
    read_pascal_string,
    read_unicode_string,
)
from psd_layout.registry import new_registry

logger = logging.getLogger(__name__)

T_ImageResources = TypeVar("T_ImageResources", bound="ImageResources")
T_ImageResource = TypeVar("T_ImageResource", bound="ImageResource")

TYPES, register = new_registry()

RESOURCE_SIGNATURES = (b"8BIM", b"MeSa")

_PHOTOSHOP_NS = "http://ns.adobe.com/photoshop/1.0/"


@define(repr=False)
class ImageResources(ListElement):
    """
    Image resources section of the PSD file. List of
    :py:class:`.ImageResource` in file order.
    """

    def get(self, key: Any) -> Optional["ImageResource"]:
        """Get the first resource of the given key."""
        key = getattr(key, "value", key)
        for item in self:
            if item.key == key:
                return item
        return None

    def get_data(self, key: Any, default: Any = None) -> Any:
        """
        Get the decoded value of a resource, or its raw bytes when the
        resource has no typed decoder.
        """
        item = self.get(key)
        if item is None:
            return default
        if item.value is None:
            return item.data
        if isinstance(item.value, ValueElement):
            return item.value.value
        return item.value

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    @classmethod
    def read(
        cls: type[T_ImageResources],
        fp: ByteReader,
        encoding: str = "macroman",
        **kwargs: Any,
    ) -> T_ImageResources:
        data = read_length_block(fp)
        logger.debug("reading image resources, len=%d" % (len(data)))
        return cls._read_body(ByteReader(data), encoding=encoding)

    @classmethod
    def _read_body(
        cls: type[T_ImageResources], fp: ByteReader, encoding: str = "macroman"
    ) -> T_ImageResources:
        items = []
        while is_readable(fp, 4):
            signature = fp.peek(4)
            if signature not in RESOURCE_SIGNATURES:
                logger.warning(
                    "Invalid image resource signature %r at %d, skipping %d bytes"
                    % (signature, fp.tell(), fp.remaining)
                )
                break
            items.append(ImageResource.read(fp, encoding=encoding))
        return cls(items)  # type: ignore[arg-type]


@define(repr=False)
class ImageResource(BaseElement):
    """
    Image resource block.

    .. py:attribute:: signature

        Binary signature, ``b'8BIM'`` or ``b'MeSa'``.

    .. py:attribute:: key

        Unique identifier for the resource. See
        :py:class:`~psd_layout.constants.Resource`.

    .. py:attribute:: name

        Resource name, usually empty.

    .. py:attribute:: data

        The raw resource data.

    .. py:attribute:: value

        Decoded resource, or None when the key has no decoder or the data
        failed to decode.
    """

    signature: bytes = field(default=b"8BIM", repr=False)
    key: int = 1000
    name: str = ""
    data: bytes = field(default=b"", repr=False)
    value: Any = None

    @classmethod
    def read(
        cls: type[T_ImageResource],
        fp: ByteReader,
        encoding: str = "macroman",
        **kwargs: Any,
    ) -> T_ImageResource:
        signature, key = read_fmt("4sH", fp)
        try:
            key = Resource(key)
        except ValueError:
            logger.info("Unknown image resource %d" % (key))
        name = read_pascal_string(fp, encoding, padding=2)
        raw_data = read_length_block(fp, padding=2)

        value = None
        kls = TYPES.get(key)
        if kls is not None:
            try:
                value = kls.frombytes(raw_data)
            except ValueError as e:
                logger.error("Failed to decode image resource %r: %s" % (key, e))
        return cls(signature, key, name, raw_data, value)


@register(Resource.RESOLUTION_INFO)
@define(repr=False)
class ResolutionInfo(BaseElement):
    """
    Resolution info structure.

    .. py:attribute:: horizontal
    .. py:attribute:: horizontal_unit
    .. py:attribute:: width_unit
    .. py:attribute:: vertical
    .. py:attribute:: vertical_unit
    .. py:attribute:: height_unit
    """

    horizontal: float = 72.0
    horizontal_unit: int = 1
    width_unit: int = 1
    vertical: float = 72.0
    vertical_unit: int = 1
    height_unit: int = 1

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "ResolutionInfo":
        horizontal, horizontal_unit, width_unit = read_fmt("I2H", fp)
        vertical, vertical_unit, height_unit = read_fmt("I2H", fp)
        return cls(
            decode_fixed_point_32bit(horizontal),
            horizontal_unit,
            width_unit,
            decode_fixed_point_32bit(vertical),
            vertical_unit,
            height_unit,
        )

    def __repr__(self) -> str:
        return "ResolutionInfo(horizontal=%g, vertical=%g)" % (
            self.horizontal,
            self.vertical,
        )


@register(Resource.ALPHA_NAMES_PASCAL)
class AlphaNamesPascal(ListElement):
    """
    List of alpha names.
    """

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "AlphaNamesPascal":
        items = []
        while is_readable(fp):
            items.append(read_pascal_string(fp, "macroman", padding=1))
        return cls(items)


@register(Resource.ALPHA_NAMES_UNICODE)
class AlphaNamesUnicode(ListElement):
    """
    List of alpha names.
    """

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "AlphaNamesUnicode":
        items = []
        while is_readable(fp, 4):
            items.append(read_unicode_string(fp))
        return cls(items)


@register(Resource.THUMBNAIL_RESOURCE)
@define(repr=False)
class ThumbnailResource(BaseElement):
    """
    Thumbnail resource structure.

    .. py:attribute:: fmt

        1 for JPEG, 0 for raw pixels.

    .. py:attribute:: width
    .. py:attribute:: height
    .. py:attribute:: row
    .. py:attribute:: total_size
    .. py:attribute:: bits
    .. py:attribute:: planes
    .. py:attribute:: data
    """

    _RAW_MODE = "RGB"

    fmt: int = 0
    width: int = 0
    height: int = 0
    row: int = 0
    total_size: int = 0
    bits: int = 0
    planes: int = 0
    data: bytes = field(default=b"", repr=False)

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "ThumbnailResource":
        fmt, width, height, row, total_size, size, bits, planes = read_fmt("6I2H", fp)
        data = fp.read(size)
        return cls(fmt, width, height, row, total_size, bits, planes, data)

    def __repr__(self) -> str:
        return "%s(fmt=%d, size=%dx%d)" % (
            self.__class__.__name__,
            self.fmt,
            self.width,
            self.height,
        )


@register(Resource.THUMBNAIL_RESOURCE_PS4)
class ThumbnailResourceV4(ThumbnailResource):
    _RAW_MODE = "BGR"


@register(Resource.XMP_METADATA)
@define(repr=False, eq=False, order=False)
class XMPMetadata(ValueElement):
    """
    XMP metadata packet.

    .. py:attribute:: value

        XML text of the packet.
    """

    value: str = ""

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "XMPMetadata":
        return cls(fp.read().decode("utf-8", "replace").rstrip("\x00"))

    @property
    def category(self) -> str:
        """
        Value of ``photoshop:Category``, written either as an element or as
        an attribute of ``rdf:Description``. Empty string when absent.
        """
        try:
            root = ET.fromstring(self.value.strip().encode("utf-8"))
        except ET.ParseError as e:
            logger.warning("Failed to parse XMP metadata: %s" % e)
            return ""

        tag = "{%s}Category" % _PHOTOSHOP_NS
        for element in root.iter():
            if tag in element.attrib:
                return element.attrib[tag]
            if element.tag == tag:
                return (element.text or "").strip()
        return ""
