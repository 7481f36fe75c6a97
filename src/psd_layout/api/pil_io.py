"""
PIL IO module.
"""

import io
import logging
from typing import TYPE_CHECKING, Optional

from PIL import Image

from psd_layout.psd.image_resources import ThumbnailResource

if TYPE_CHECKING:
    from psd_layout.api.document import Document
    from psd_layout.api.layers import Layer

logger = logging.getLogger(__name__)


def convert_layer_to_pil(layer: "Layer") -> Optional[Image.Image]:
    """Convert layer pixels to an RGBA PIL Image."""
    if layer.width == 0 or layer.height == 0:
        return None
    return Image.fromarray(layer.numpy())


def convert_image_data_to_pil(psd: "Document") -> Image.Image:
    """Convert the merged image to an RGBA PIL Image."""
    return Image.fromarray(psd.numpy())


def convert_thumbnail_to_pil(thumbnail: ThumbnailResource) -> Optional[Image.Image]:
    """Convert thumbnail resource to PIL Image."""
    if thumbnail.fmt == 1:
        image = Image.open(io.BytesIO(thumbnail.data))
        image.load()
        return image
    elif thumbnail.fmt == 0:
        return Image.frombytes(
            "RGB",
            (thumbnail.width, thumbnail.height),
            thumbnail.data,
            "raw",
            thumbnail._RAW_MODE,
            thumbnail.row,
        )
    logger.warning("Unknown thumbnail format %d" % thumbnail.fmt)
    return None
