"""
PSD document structure module.

This module contains the :py:class:`PSD` class, the low-level binary
structure of a whole PSD file.
"""

import logging
from typing import Any, Generator, Optional, TypeVar

from attrs import define, field

from .base import BaseElement
from .bin_utils import ByteReader
from .color_mode_data import ColorModeData
from .header import FileHeader
from .image_data import ImageData
from .image_resources import ImageResources
from .layer_and_mask import ChannelData, LayerAndMaskInformation, LayerInfo, LayerRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="PSD")


@define(repr=False)
class PSD(BaseElement):
    """
    Low-level PSD file structure that resembles the file format sections.

    Example::

        from psd_layout.psd import PSD

        with open(input_file, 'rb') as f:
            psd = PSD.frombytes(f.read())

    .. py:attribute:: header

        See :py:class:`.FileHeader`.

    .. py:attribute:: color_mode_data

        See :py:class:`.ColorModeData`.

    .. py:attribute:: image_resources

        See :py:class:`.ImageResources`.

    .. py:attribute:: layer_and_mask_information

        See :py:class:`.LayerAndMaskInformation`.

    .. py:attribute:: image_data

        See :py:class:`.ImageData`.
    """

    header: FileHeader = field(factory=FileHeader)
    color_mode_data: ColorModeData = field(factory=ColorModeData)
    image_resources: ImageResources = field(factory=ImageResources)
    layer_and_mask_information: LayerAndMaskInformation = field(
        factory=LayerAndMaskInformation
    )
    image_data: ImageData = field(factory=ImageData)

    @classmethod
    def read(
        cls: type[T], fp: ByteReader, encoding: str = "macroman", **kwargs: Any
    ) -> T:
        header = FileHeader.read(fp)
        logger.debug("read %s" % header)
        return cls(
            header,
            ColorModeData.read(fp),
            ImageResources.read(fp, encoding),
            LayerAndMaskInformation.read(fp, encoding, header.depth),
            ImageData.read(fp, header),
        )

    def _iter_layers(
        self,
    ) -> Generator[tuple[LayerRecord, list[ChannelData]], None, None]:
        """
        Iterate over (layer_record, channel_data) pairs in file order.
        """
        layer_info = self._get_layer_info()
        if layer_info is not None:
            yield from zip(layer_info.layer_records, layer_info.channel_image_data)

    def _get_layer_info(self) -> Optional[LayerInfo]:
        return self.layer_and_mask_information.get_layer_info()
