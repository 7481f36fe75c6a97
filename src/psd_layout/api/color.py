"""
Color conversion of channel planes to 8-bit RGBA.

All functions work on numpy arrays. 16-bit planes are reduced to their high
byte before conversion.

Example::

    from psd_layout.api.color import cmyk_to_rgb, lab_to_rgb

    cmyk_to_rgb(0, 0, 0, 255)  # array([0, 0, 0], dtype=uint8)
"""

import logging
from typing import Optional, Sequence

import numpy as np

from psd_layout.constants import ColorMode

logger = logging.getLogger(__name__)

# D65 reference white.
_WHITE_POINT = (0.95047, 1.0, 1.08883)

_XYZ_TO_RGB = np.array(
    [
        [3.2406, -1.5372, -0.4986],
        [-0.9689, 1.8758, 0.0415],
        [0.0557, -0.2040, 1.0570],
    ]
)


def plane_to_array(
    data: bytes, width: int, height: int, depth: int = 8
) -> np.ndarray:
    """
    Convert a decompressed plane to a ``(height, width)`` uint8 array.

    Missing or short planes are filled with zeros.
    """
    if depth == 16:
        arr = np.frombuffer(data, dtype=">u2")
        arr = (arr >> 8).astype(np.uint8)
    else:
        arr = np.frombuffer(data, dtype=np.uint8)

    size = width * height
    if arr.size < size:
        if arr.size:
            logger.warning("Plane is shorter than expected: %d < %d" % (arr.size, size))
        arr = np.concatenate([arr, np.zeros(size - arr.size, dtype=np.uint8)])
    return arr[:size].reshape((height, width))


def to_rgb(
    color_mode: ColorMode,
    planes: Sequence[np.ndarray],
    palette: Optional[bytes] = None,
) -> np.ndarray:
    """
    Convert color planes to a ``(height, width, 3)`` uint8 RGB array.

    :param color_mode: color mode of the planes.
    :param planes: 2D uint8 arrays in channel order, color planes only.
    :param palette: color mode data, required for indexed color.

    Multichannel planes are read as cyan, magenta and yellow inks with no
    black ink (k = 0), so the image keeps its colors instead of going black.
    """
    if color_mode in (ColorMode.GRAYSCALE, ColorMode.DUOTONE, ColorMode.BITMAP):
        gray = planes[0]
        return np.stack([gray, gray, gray], axis=-1)
    elif color_mode == ColorMode.INDEXED:
        return indexed_to_rgb(planes[0], palette or b"")
    elif color_mode == ColorMode.RGB:
        return np.stack(planes[:3], axis=-1)
    elif color_mode == ColorMode.CMYK:
        c, m, y, k = (1.0 - plane.astype(np.float64) / 256.0 for plane in planes[:4])
        return _cmyk_fractions_to_rgb(c, m, y, k)
    elif color_mode == ColorMode.MULTICHANNEL:
        c, m, y = (1.0 - plane.astype(np.float64) / 256.0 for plane in planes[:3])
        return _cmyk_fractions_to_rgb(c, m, y, np.zeros_like(c))
    elif color_mode == ColorMode.LAB:
        return lab_to_rgb(planes[0], planes[1], planes[2])
    raise ValueError("Unsupported color mode %r" % color_mode)


def indexed_to_rgb(index: np.ndarray, palette: bytes) -> np.ndarray:
    """
    Look up indices in a color table of 256 reds, 256 greens and 256 blues.
    """
    lut = np.frombuffer(palette, dtype=np.uint8)[:768]
    if lut.size < 768:
        logger.warning("Color table is shorter than 768 bytes: %d" % lut.size)
        lut = np.concatenate([lut, np.zeros(768 - lut.size, dtype=np.uint8)])
    lut = lut.reshape((3, 256))
    return np.stack([lut[0][index], lut[1][index], lut[2][index]], axis=-1)


def cmyk_to_rgb(c, m, y, k) -> np.ndarray:  # type: ignore[no-untyped-def]
    """
    Convert CMYK ink amounts in 0-255 to RGB.

    Inputs follow the usual ink convention where 0 means no ink, so
    ``(0, 0, 0, 0)`` is white and ``(0, 0, 0, 255)`` is black. Note that PSD
    files store CMYK planes inverted (255 means no ink).

    :return: uint8 array with a trailing axis of size 3.
    """
    fractions = (np.asarray(value, dtype=np.float64) / 255.0 for value in (c, m, y, k))
    return _cmyk_fractions_to_rgb(*fractions)


def _cmyk_fractions_to_rgb(
    c: np.ndarray, m: np.ndarray, y: np.ndarray, k: np.ndarray
) -> np.ndarray:
    rgb = [255.0 * (1.0 - (ink * (1.0 - k) + k)) for ink in (c, m, y)]
    return _to_uint8(np.stack(rgb, axis=-1))


def lab_to_rgb(l, a, b) -> np.ndarray:  # type: ignore[no-untyped-def]
    """
    Convert PSD Lab bytes to sRGB.

    ``l`` in 0-255 maps to L* in 0-100, ``a`` and ``b`` are offset by 128.

    :return: uint8 array with a trailing axis of size 3.
    """
    lightness = np.asarray(l, dtype=np.float64) / 2.56
    a_star = np.asarray(a, dtype=np.float64) - 128.0
    b_star = np.asarray(b, dtype=np.float64) - 128.0

    fy = (lightness + 16.0) / 116.0
    fx = a_star / 500.0 + fy
    fz = fy - b_star / 200.0
    xyz = np.stack(
        [
            _WHITE_POINT[0] * _lab_inverse(fx),
            _WHITE_POINT[1] * _lab_inverse(fy),
            _WHITE_POINT[2] * _lab_inverse(fz),
        ],
        axis=-1,
    )

    linear = xyz @ _XYZ_TO_RGB.T
    linear = np.clip(linear, 0.0, None)
    srgb = np.where(
        linear <= 0.0031308,
        12.92 * linear,
        1.055 * np.power(linear, 1.0 / 2.4) - 0.055,
    )
    return _to_uint8(srgb * 255.0)


def _lab_inverse(t: np.ndarray) -> np.ndarray:
    cube = t**3
    return np.where(cube > 0.008856, cube, (t - 16.0 / 116.0) / 7.787)


def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def mask_coverage(
    mask: np.ndarray,
    mask_bbox: tuple[int, int, int, int],
    layer_bbox: tuple[int, int, int, int],
    relative: bool = False,
) -> np.ndarray:
    """
    Sample a user mask over the layer rectangle. Pixels outside of the mask
    rectangle are fully covered.

    :param mask: ``(mask_height, mask_width)`` uint8 array.
    :param mask_bbox: mask ``(left, top, right, bottom)``.
    :param layer_bbox: layer ``(left, top, right, bottom)``.
    :param relative: whether the mask position is relative to the layer.
    :return: ``(layer_height, layer_width)`` uint8 array.
    """
    left, top, right, bottom = layer_bbox
    width, height = right - left, bottom - top
    mask_height, mask_width = mask.shape

    if relative:
        xs = np.arange(width) - mask_bbox[0]
        ys = np.arange(height) - mask_bbox[1]
    else:
        xs = np.arange(width) + left - mask_bbox[0]
        ys = np.arange(height) + top - mask_bbox[1]

    valid_x = (xs >= 0) & (xs < mask_width)
    valid_y = (ys >= 0) & (ys < mask_height)
    coverage = np.full((height, width), 255, dtype=np.uint8)
    coverage[np.ix_(valid_y, valid_x)] = mask[np.ix_(ys[valid_y], xs[valid_x])]
    return coverage


def apply_alpha(
    rgb: np.ndarray,
    alpha: Optional[np.ndarray] = None,
    coverage: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Stack RGB with alpha, 255 when absent, scaled by the mask coverage.

    :return: ``(height, width, 4)`` uint8 array.
    """
    height, width = rgb.shape[:2]
    if alpha is None:
        alpha = np.full((height, width), 255, dtype=np.uint8)
    if coverage is not None:
        alpha = (alpha.astype(np.uint16) * coverage // 255).astype(np.uint8)
    return np.dstack([rgb, alpha])
