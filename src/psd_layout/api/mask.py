"""
Mask module.
"""

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np

from psd_layout.api.color import plane_to_array
from psd_layout.constants import ChannelID
from psd_layout.psd.layer_and_mask import MaskData

if TYPE_CHECKING:
    from psd_layout.api.layers import Layer

logger = logging.getLogger(__name__)


class Mask:
    """User mask attached to a layer.

    The mask has its own rectangle and one byte per pixel, taken from the
    user layer mask channel (-2).
    """

    def __init__(self, layer: "Layer", data: MaskData):
        self._layer = layer
        self._data = data

    @property
    def background_color(self) -> int:
        """Default color outside of the mask rectangle, 0 or 255."""
        return self._data.background_color

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """BBox"""
        return self.left, self.top, self.right, self.bottom

    @property
    def left(self) -> int:
        """Left coordinate."""
        return self._data.left

    @property
    def right(self) -> int:
        """Right coordinate."""
        return self._data.right

    @property
    def top(self) -> int:
        """Top coordinate."""
        return self._data.top

    @property
    def bottom(self) -> int:
        """Bottom coordinate."""
        return self._data.bottom

    @property
    def width(self) -> int:
        """Width."""
        return self._data.width

    @property
    def height(self) -> int:
        """Height."""
        return self._data.height

    @property
    def relative(self) -> bool:
        """Whether the mask position is relative to the layer."""
        return self._data.relative

    @property
    def disabled(self) -> bool:
        """Disabled."""
        return self._data.disabled

    @property
    def inverted(self) -> bool:
        return self._data.inverted

    def has_real(self) -> bool:
        """Return True if the mask has real flags."""
        return self._data.has_real

    @property
    def data(self) -> bytes:
        """Decompressed mask pixels, ``width * height`` bytes or empty."""
        channel = self._layer._get_channel(ChannelID.USER_LAYER_MASK)
        return channel.pixels if channel is not None else b""

    def numpy(self) -> Optional[np.ndarray]:
        """
        Mask pixels as a ``(height, width)`` uint8 array, or None when the
        mask has no pixel data.
        """
        if not self.data or self.width == 0 or self.height == 0:
            return None
        return plane_to_array(self.data, self.width, self.height, self._layer._depth)

    def __repr__(self) -> str:
        return "%s(offset=(%d,%d) size=%dx%d)" % (
            self.__class__.__name__,
            self.left,
            self.top,
            self.width,
            self.height,
        )
