"""
Low-level API that translates binary data to Python structure.

All the data structure in this subpackage inherits from one of the object
defined in :py:mod:`psd_layout.psd.base` module.
"""

from .document import PSD as PSD
from .layer_and_mask import (
    ChannelData as ChannelData,
    LayerInfo as LayerInfo,
    LayerRecord as LayerRecord,
    MaskData as MaskData,
)
from .tagged_blocks import TaggedBlock as TaggedBlock, TaggedBlocks as TaggedBlocks

__all__ = [
    "PSD",
    "LayerInfo",
    "LayerRecord",
    "ChannelData",
    "MaskData",
    "TaggedBlock",
    "TaggedBlocks",
]
