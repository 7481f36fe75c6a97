"""
Various constants for psd_layout
"""

from enum import Enum, IntEnum, IntFlag


class ColorMode(IntEnum):
    """
    Color mode.
    """

    BITMAP = 0
    GRAYSCALE = 1
    INDEXED = 2
    RGB = 3
    CMYK = 4
    MULTICHANNEL = 7
    DUOTONE = 8
    LAB = 9

    @staticmethod
    def channels(value: "ColorMode") -> int:
        return {
            ColorMode.BITMAP: 1,
            ColorMode.GRAYSCALE: 1,
            ColorMode.INDEXED: 1,
            ColorMode.RGB: 3,
            ColorMode.CMYK: 4,
            ColorMode.MULTICHANNEL: 3,
            ColorMode.DUOTONE: 1,
            ColorMode.LAB: 3,
        }[value]


class Compression(IntEnum):
    """
    Compression modes.

    Compression. 0 = Raw Data, 1 = RLE compressed, 2 = ZIP without
    prediction, 3 = ZIP with prediction.
    """

    RAW = 0
    RLE = 1
    ZIP = 2
    ZIP_WITH_PREDICTION = 3


class ChannelID(IntEnum):
    """
    Channel types.
    """

    CHANNEL_0 = 0  # Red, Cyan, Gray, Index
    CHANNEL_1 = 1  # Green, Magenta
    CHANNEL_2 = 2  # Blue, Yellow
    CHANNEL_3 = 3  # Black
    TRANSPARENCY_MASK = -1
    USER_LAYER_MASK = -2
    REAL_USER_LAYER_MASK = -3


class Clipping(IntEnum):
    """
    Clipping.
    """

    BASE = 0
    NON_BASE = 1


class LayerFlag(IntFlag):
    """
    Layer record flag bits. A set ``HIDDEN`` bit means the layer is not
    visible.
    """

    TRANSPARENCY_PROTECTED = 1
    HIDDEN = 2
    OBSOLETE = 4
    PHOTOSHOP_V5_LATER = 8
    PIXEL_DATA_IRRELEVANT = 16


class MaskFlag(IntFlag):
    """
    Layer mask flag bits.
    """

    POS_RELATIVE_TO_LAYER = 1
    MASK_DISABLED = 2
    INVERT_MASK = 4
    USER_MASK_FROM_RENDER = 8
    PARAMETERS_APPLIED = 16


class SectionDivider(IntEnum):
    OTHER = 0
    OPEN_FOLDER = 1
    CLOSED_FOLDER = 2
    BOUNDING_SECTION_DIVIDER = 3


class Justification(IntEnum):
    """
    Paragraph justification of a text layer.
    """

    LEFT = 0
    RIGHT = 1
    CENTER = 2


class BlendMode(bytes, Enum):
    """
    Blend modes.
    """

    PASS_THROUGH = b"pass"
    NORMAL = b"norm"
    DISSOLVE = b"diss"
    DARKEN = b"dark"
    MULTIPLY = b"mul "
    COLOR_BURN = b"idiv"
    LINEAR_BURN = b"lbrn"
    DARKER_COLOR = b"dkCl"
    LIGHTEN = b"lite"
    SCREEN = b"scrn"
    COLOR_DODGE = b"div "
    LINEAR_DODGE = b"lddg"
    LIGHTER_COLOR = b"lgCl"
    OVERLAY = b"over"
    SOFT_LIGHT = b"sLit"
    HARD_LIGHT = b"hLit"
    VIVID_LIGHT = b"vLit"
    LINEAR_LIGHT = b"lLit"
    PIN_LIGHT = b"pLit"
    HARD_MIX = b"hMix"
    DIFFERENCE = b"diff"
    EXCLUSION = b"smud"
    SUBTRACT = b"fsub"
    DIVIDE = b"fdiv"
    HUE = b"hue "
    SATURATION = b"sat "
    COLOR = b"colr"
    LUMINOSITY = b"lum "


class Resource(IntEnum):
    """
    Image resource keys.

    Only the resources this package knows how to decode, plus a few common
    ones kept as raw bytes, are listed here.
    """

    RESOLUTION_INFO = 1005
    ALPHA_NAMES_PASCAL = 1006
    CAPTION_PASCAL = 1008
    LAYER_STATE_INFO = 1024
    LAYER_GROUP_INFO = 1026
    IPTC_NAA = 1028
    GRID_AND_GUIDES_INFO = 1032
    THUMBNAIL_RESOURCE_PS4 = 1033
    COPYRIGHT_FLAG = 1034
    THUMBNAIL_RESOURCE = 1036
    GLOBAL_ANGLE = 1037
    ICC_PROFILE = 1039
    GLOBAL_ALTITUDE = 1049
    ALPHA_NAMES_UNICODE = 1045
    LAYER_SELECTION_IDS = 1069
    VERSION_INFO = 1057
    EXIF_DATA_1 = 1058
    EXIF_DATA_3 = 1059
    XMP_METADATA = 1060
    PRINT_FLAGS_INFO = 10000


class Tag(bytes, Enum):
    """
    Tagged block keys of the layer extra data.

    Keys not listed here are kept as raw ``bytes``.
    """

    EFFECTS_LAYER = b"lrFX"
    OBJECT_BASED_EFFECTS_LAYER_INFO = b"lfx2"
    TYPE_TOOL_INFO = b"tySh"
    TYPE_TOOL_OBJECT_SETTING = b"TySh"
    UNICODE_LAYER_NAME = b"luni"
    LAYER_ID = b"lyid"
    SECTION_DIVIDER_SETTING = b"lsct"
    NESTED_SECTION_DIVIDER_SETTING = b"lsdk"
    PROTECTED_SETTING = b"lspf"
    SHEET_COLOR_SETTING = b"lclr"
    METADATA_SETTING = b"shmd"
    BLEND_CLIPPING_ELEMENTS = b"clbl"
    BLEND_INTERIOR_ELEMENTS = b"infx"
    KNOCKOUT_SETTING = b"knko"
    LAYER_16 = b"Lr16"
    LAYER_32 = b"Lr32"
