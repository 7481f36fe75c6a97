"""
Layer module.

Layers are kept in a flat list in file order (bottom to top) by
:py:class:`~psd_layout.api.document.Document`. The group hierarchy is
rebuilt from the marker layers Photoshop writes around groups by
:py:func:`build_layer_tree`.
"""

import logging
from typing import TYPE_CHECKING, Any, Iterator, Optional, Sequence

import numpy as np

from psd_layout.api.color import (
    apply_alpha,
    mask_coverage,
    plane_to_array,
    to_rgb,
)
from psd_layout.api.mask import Mask
from psd_layout.constants import (
    ChannelID,
    ColorMode,
    SectionDivider,
    Tag,
)
from psd_layout.psd.layer_and_mask import ChannelData, LayerRecord
from psd_layout.psd.tagged_blocks import TaggedBlocks
from psd_layout.psd.type_tool import TypeToolObjectSetting

if TYPE_CHECKING:
    from PIL import Image

    from psd_layout.api.document import Document

logger = logging.getLogger(__name__)

GROUP_END_NAMES = ("</Layer set>", "</Layer group>")


class Layer:
    """
    A single layer with its decoded channels.

    :param psd: owning :py:class:`~psd_layout.api.document.Document`.
    :param record: :py:class:`~psd_layout.psd.layer_and_mask.LayerRecord`.
    :param channels: list of
        :py:class:`~psd_layout.psd.layer_and_mask.ChannelData`.
    """

    def __init__(
        self,
        psd: "Document",
        record: LayerRecord,
        channels: Sequence[ChannelData],
    ):
        self._psd = psd
        self._record = record
        self._channels = list(channels)
        self._children: list["Layer"] = []

    @property
    def name(self) -> str:
        """
        Layer name. The Unicode name is preferred over the Pascal string
        name when present.
        """
        unicode_name = self._record.tagged_blocks.get_data(Tag.UNICODE_LAYER_NAME)
        return unicode_name or self._record.name

    @property
    def kind(self) -> str:
        """
        Kind of this layer, either 'group', 'type', or 'pixel'.
        """
        if self.is_group():
            return "group"
        if self.text is not None:
            return "type"
        return "pixel"

    @property
    def layer_id(self) -> Optional[int]:
        """Layer ID, or None."""
        return self._record.tagged_blocks.get_data(Tag.LAYER_ID)

    @property
    def visible(self) -> bool:
        """Layer visibility."""
        return self._record.visible

    @property
    def transparency_protected(self) -> bool:
        return self._record.transparency_protected

    @property
    def pixel_data_irrelevant(self) -> bool:
        return self._record.pixel_data_irrelevant

    @property
    def flags(self) -> int:
        """Raw flag bits, see :py:class:`~psd_layout.constants.LayerFlag`."""
        return self._record.flags

    @property
    def opacity(self) -> int:
        """Opacity of this layer in [0, 255] range."""
        return self._record.opacity

    @property
    def clipping(self) -> bool:
        """Whether this layer is clipped to the layer below."""
        return not self._record.clipping_base

    @property
    def blend_mode(self) -> Any:
        """
        Blend mode of this layer, a
        :py:class:`~psd_layout.constants.BlendMode` or raw bytes for unknown
        keys.
        """
        return self._record.blend_mode

    @property
    def blending_ranges(self) -> bytes:
        return self._record.blending_ranges

    @property
    def left(self) -> int:
        """Left coordinate."""
        return self._record.left

    @property
    def top(self) -> int:
        """Top coordinate."""
        return self._record.top

    @property
    def right(self) -> int:
        """Right coordinate."""
        return self._record.right

    @property
    def bottom(self) -> int:
        """Bottom coordinate."""
        return self._record.bottom

    @property
    def width(self) -> int:
        """Width of the layer."""
        return self._record.width

    @property
    def height(self) -> int:
        """Height of the layer."""
        return self._record.height

    @property
    def offset(self) -> tuple[int, int]:
        """(left, top) tuple."""
        return self.left, self.top

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) tuple."""
        return self.left, self.top, self.right, self.bottom

    @property
    def channels(self) -> list[ChannelData]:
        """Channels in file order."""
        return list(self._channels)

    @property
    def mask(self) -> Optional[Mask]:
        """User mask, or None."""
        if self._record.mask_data is None:
            return None
        return Mask(self, self._record.mask_data)

    def has_mask(self) -> bool:
        return self._record.mask_data is not None

    @property
    def tagged_blocks(self) -> TaggedBlocks:
        """Extra data records of this layer."""
        return self._record.tagged_blocks

    @property
    def text(self) -> Optional[TypeToolObjectSetting]:
        """
        Text metadata of a text layer, or None.

        See :py:class:`~psd_layout.psd.type_tool.TypeToolObjectSetting`.
        """
        return self._record.tagged_blocks.get_data(Tag.TYPE_TOOL_OBJECT_SETTING)

    @property
    def section_divider(self) -> Optional[SectionDivider]:
        return self._record.section_divider

    def has_effects(self) -> bool:
        """Whether the layer has layer effects."""
        blocks = self._record.tagged_blocks
        return (
            Tag.OBJECT_BASED_EFFECTS_LAYER_INFO in blocks or Tag.EFFECTS_LAYER in blocks
        )

    def is_group(self) -> bool:
        """Whether this layer opens a group."""
        if self.section_divider in (
            SectionDivider.OPEN_FOLDER,
            SectionDivider.CLOSED_FOLDER,
        ):
            return True
        return self._record.pixel_data_irrelevant

    def is_group_end(self) -> bool:
        """Whether this layer is a marker that closes a group."""
        name = self.name
        if any(marker in name for marker in GROUP_END_NAMES):
            return True
        if name == " copy" and self.height == 0:
            return True
        return self.section_divider == SectionDivider.BOUNDING_SECTION_DIVIDER

    @property
    def children(self) -> tuple["Layer", ...]:
        """Child layers, top to bottom. Only groups have children."""
        return tuple(self._children)

    def descendants(self) -> Iterator["Layer"]:
        """
        Return a generator to iterate over all descendant layers, depth
        first.
        """
        for layer in self._children:
            yield layer
            yield from layer.descendants()

    @property
    def _depth(self) -> int:
        return self._psd.depth

    def _get_channel(self, channel_id: int) -> Optional[ChannelData]:
        for channel in self._channels:
            if channel.id == channel_id:
                return channel
        return None

    def numpy(self) -> np.ndarray:
        """
        Layer pixels as a ``(height, width, 4)`` uint8 RGBA array.

        Alpha comes from the transparency channel, scaled by the user mask
        when present.
        """
        width, height, depth = self.width, self.height, self._depth
        color_mode = self._psd.color_mode

        planes = []
        for index in range(ColorMode.channels(color_mode)):
            channel = self._get_channel(index)
            data = channel.pixels if channel is not None else b""
            planes.append(plane_to_array(data, width, height, depth))
        rgb = to_rgb(color_mode, planes, self._psd.color_mode_data)

        alpha = None
        transparency = self._get_channel(ChannelID.TRANSPARENCY_MASK)
        if transparency is not None and transparency.pixels:
            alpha = plane_to_array(transparency.pixels, width, height, depth)

        coverage = None
        mask = self.mask
        if mask is not None and not mask.disabled:
            mask_array = mask.numpy()
            if mask_array is not None:
                coverage = mask_coverage(
                    mask_array, mask.bbox, self.bbox, relative=mask.relative
                )
        return apply_alpha(rgb, alpha, coverage)

    def topil(self) -> Optional["Image.Image"]:
        """
        Get a PIL RGBA image of this layer, or None for empty layers.
        """
        from psd_layout.api.pil_io import convert_layer_to_pil

        return convert_layer_to_pil(self)

    def __repr__(self) -> str:
        return "%s(%r size=%dx%d%s)" % (
            self.__class__.__name__,
            self.name,
            self.width,
            self.height,
            "" if self.visible else " hidden",
        )


def build_layer_tree(layers: Sequence[Layer]) -> list[Layer]:
    """
    Rebuild the group hierarchy from a flat list of layers in file order.

    The list is walked from the top-most layer. A layer with the
    pixel-data-irrelevant flag opens a group; a group end marker closes the
    innermost open group, which then becomes a child of the enclosing group
    or a root. Other layers with a non-empty area join the open group, or
    become roots when no group is open. Empty layers are dropped.

    :param layers: layers in file order, bottom to top.
    :return: root layers, top to bottom.
    """
    for layer in layers:
        layer._children = []

    roots: list[Layer] = []
    stack: list[Layer] = []
    current: Optional[Layer] = None

    for layer in reversed(layers):
        if layer.is_group_end():
            if stack:
                parent = stack.pop()
                if current is not None:
                    parent._children.append(current)
                current = parent
            elif current is not None:
                roots.append(current)
                current = None
        elif layer.is_group():
            if current is not None:
                stack.append(current)
            current = layer
        elif layer.width > 0 and layer.height > 0:
            if current is not None:
                current._children.append(layer)
            else:
                roots.append(layer)
        else:
            logger.debug("Dropping empty layer %r" % layer.name)

    if current is not None:
        if not roots and current._children:
            roots.append(current)
        else:
            logger.warning("Group %r is not closed" % current.name)
    return roots
