"""
Document module.

:py:class:`Document` is the main entry point. It decodes a whole file at
once; the result keeps no reference to the input and is not modified
afterwards.
"""

import logging
import os
from typing import Any, BinaryIO, Iterator, Optional, Union

import numpy as np
from PIL import Image

from psd_layout.api import pil_io
from psd_layout.api.color import apply_alpha, plane_to_array, to_rgb
from psd_layout.api.layers import Layer, build_layer_tree
from psd_layout.constants import ColorMode, Resource
from psd_layout.psd import PSD
from psd_layout.psd.image_resources import (
    ImageResources,
    ResolutionInfo,
    ThumbnailResource,
)

logger = logging.getLogger(__name__)


class Document:
    """
    Photoshop document.

    Example::

        from psd_layout import Document

        doc = Document.open('example.psd')
        for layer in doc.descendants():
            print(layer.name, layer.bbox)

    Iterating over a document yields the root layers of the layer tree, top
    to bottom. :py:attr:`layers` keeps every layer in file order.
    """

    def __init__(self, data: PSD):
        if not isinstance(data, PSD):
            raise TypeError("Expected PSD, got %s" % type(data).__name__)
        self._record = data
        self._layers = [
            Layer(self, record, channels) for record, channels in data._iter_layers()
        ]
        self._tree = build_layer_tree(self._layers)

    @classmethod
    def open(
        cls, fp: Union[BinaryIO, str, bytes, os.PathLike], **kwargs: Any
    ) -> "Document":
        """
        Open a PSD document.

        :param fp: filename or file-like object.
        :param encoding: charset encoding of the pascal string within the file,
            default 'macroman'.
        :return: A :py:class:`~psd_layout.api.document.Document` object.
        :raise PSDFormatError: when the file is not a valid PSD file.
        """
        if isinstance(fp, (str, bytes, os.PathLike)):
            with open(fp, "rb") as f:
                data = f.read()
        else:
            data = fp.read()
        return cls.frombytes(data, **kwargs)

    @classmethod
    def frombytes(cls, data: bytes, **kwargs: Any) -> "Document":
        """
        Decode a PSD document from bytes.

        :param data: file content.
        :param encoding: charset encoding of the pascal string within the file,
            default 'macroman'.
        """
        return cls(PSD.frombytes(data, **kwargs))

    @property
    def width(self) -> int:
        """Document width."""
        return self._record.header.width

    @property
    def height(self) -> int:
        """Document height."""
        return self._record.header.height

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def depth(self) -> int:
        """Pixel depth bits."""
        return self._record.header.depth

    @property
    def channels(self) -> int:
        """Number of color channels."""
        return self._record.header.channels

    @property
    def color_mode(self) -> ColorMode:
        """Document color mode, see :py:class:`~psd_layout.constants.ColorMode`."""
        return self._record.header.color_mode

    @property
    def version(self) -> int:
        """Document version, always 1."""
        return self._record.header.version

    @property
    def color_mode_data(self) -> bytes:
        """Color table of indexed color documents, or duotone data."""
        return self._record.color_mode_data.value

    @property
    def image_resources(self) -> ImageResources:
        """
        Document image resources.
        :py:class:`~psd_layout.psd.image_resources.ImageResources` is a
        list of resources in file order.

        Example::

            from psd_layout.constants import Resource
            version_info = doc.image_resources.get_data(Resource.XMP_METADATA)
        """
        return self._record.image_resources

    @property
    def resolution(self) -> Optional[ResolutionInfo]:
        return self.image_resources.get_data(Resource.RESOLUTION_INFO)

    @property
    def xmp_metadata(self) -> Optional[str]:
        """XMP metadata packet as text, or None."""
        return self.image_resources.get_data(Resource.XMP_METADATA)

    @property
    def category(self) -> str:
        """Document category from the XMP metadata, empty when absent."""
        item = self.image_resources.get(Resource.XMP_METADATA)
        if item is None or item.value is None:
            return ""
        return item.value.category

    @property
    def absolute_alpha(self) -> bool:
        """
        Whether the first alpha channel of the merged image holds the
        transparency of the merged result.
        """
        layer_info = self._record._get_layer_info()
        return layer_info is not None and layer_info.absolute_alpha

    @property
    def global_layer_mask_info(self) -> Optional[bytes]:
        return self._record.layer_and_mask_information.global_layer_mask_info

    @property
    def layers(self) -> list[Layer]:
        """All the layers in file order, bottom to top, group markers included."""
        return list(self._layers)

    @property
    def tree(self) -> list[Layer]:
        """Root layers, top to bottom."""
        return list(self._tree)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._tree)

    def __len__(self) -> int:
        return len(self._tree)

    def __getitem__(self, key: int) -> Layer:
        return self._tree[key]

    def descendants(self) -> Iterator[Layer]:
        """
        Return a generator to iterate over all the layers of the tree, depth
        first.
        """
        for layer in self._tree:
            yield layer
            yield from layer.descendants()

    def find(self, name: str) -> Optional[Layer]:
        """
        Returns the first layer found for the given layer name

        :param name:
        """
        for layer in self.findall(name):
            return layer
        return None

    def findall(self, name: str) -> Iterator[Layer]:
        """
        Return a generator to iterate over all layers with the given name.

        :param name:
        """
        for layer in self.descendants():
            if layer.name == name:
                yield layer

    @property
    def merged_planes(self) -> list[bytes]:
        """Decompressed planes of the merged image in channel order."""
        return list(self._record.image_data.planes)

    def has_thumbnail(self) -> bool:
        """True if the document has a thumbnail resource."""
        return (
            Resource.THUMBNAIL_RESOURCE in self.image_resources
            or Resource.THUMBNAIL_RESOURCE_PS4 in self.image_resources
        )

    def thumbnail(self) -> Optional[Image.Image]:
        """
        Returns a thumbnail image in PIL.Image. When the file does not
        contain an embedded thumbnail image, returns None.
        """
        for key in (Resource.THUMBNAIL_RESOURCE, Resource.THUMBNAIL_RESOURCE_PS4):
            value = self.image_resources.get_data(key)
            if isinstance(value, ThumbnailResource):
                return pil_io.convert_thumbnail_to_pil(value)
        return None

    def numpy(self) -> np.ndarray:
        """
        Merged image as a ``(height, width, 4)`` uint8 RGBA array.
        """
        expected = ColorMode.channels(self.color_mode)
        planes = [
            plane_to_array(data, self.width, self.height, self.depth)
            for data in self._record.image_data.planes
        ]
        while len(planes) < expected:
            planes.append(np.zeros((self.height, self.width), dtype=np.uint8))

        rgb = to_rgb(self.color_mode, planes[:expected], self.color_mode_data)
        alpha = None
        if self.absolute_alpha and len(planes) > expected:
            alpha = planes[expected]
        return apply_alpha(rgb, alpha)

    def topil(self) -> Image.Image:
        """
        Get the merged image as a PIL RGBA Image.
        """
        return pil_io.convert_image_data_to_pil(self)

    def __repr__(self) -> str:
        return ("%s(mode=%s size=%dx%d depth=%d channels=%d)") % (
            self.__class__.__name__,
            self.color_mode.name,
            self.width,
            self.height,
            self.depth,
            self.channels,
        )
