import pytest

from psd_layout.constants import Justification, Tag
from psd_layout.psd.bin_utils import ByteReader
from psd_layout.psd.tagged_blocks import TaggedBlocks
from psd_layout.psd.type_tool import FillColor, TypeToolObjectSetting

from ..utils import TEXT_ENGINE_DATA, tagged_block

PREFIX = (
    b"/Text (a) /Justification 0 /FontSize 1 /FillColor /Values [ 1 0 0 0 ]"
    b" /FontSet /Name (F) "
)


def test_type_tool_object_setting() -> None:
    setting = TypeToolObjectSetting.frombytes(TEXT_ENGINE_DATA)
    assert setting.text == "Hi)!\r"
    assert setting.justification == Justification.CENTER
    assert setting.font_size == 24.5
    assert setting.fill_color == FillColor(1.0, 0.5, 0.25, 0.0)
    assert setting.font_name == "Arial"
    assert setting.warp_style == "warpArch"


def test_registered_as_tagged_block() -> None:
    data = tagged_block(b"TySh", TEXT_ENGINE_DATA)
    blocks = TaggedBlocks.read(ByteReader(data), len(data))
    setting = blocks.get_data(Tag.TYPE_TOOL_OBJECT_SETTING)
    assert isinstance(setting, TypeToolObjectSetting)
    assert setting.font_name == "Arial"


def test_no_text() -> None:
    setting = TypeToolObjectSetting.frombytes(b"\x00\x01 /FontSize 12.0 ")
    assert setting == TypeToolObjectSetting()


def test_missing_marker_stops_scan() -> None:
    data = b"/Text (abc) /FontSize 12.0 /FontSet [ << /Name (Helvetica) >> ]"
    setting = TypeToolObjectSetting.frombytes(data)
    assert setting.text == "abc"
    assert setting.justification == Justification.LEFT
    # /Justification is missing, so the scan is at the end of the data.
    assert setting.font_size == 0.0
    assert setting.font_name == ""


def test_warp_style_with_zero_length() -> None:
    data = PREFIX + b"warpStyleenum\x00\x00\x00\x00warpStyle\x00\x00\x00\x00wNon"
    setting = TypeToolObjectSetting.frombytes(data)
    assert setting.warp_style == "wNon"


@pytest.mark.parametrize(
    "data",
    [
        PREFIX + b"warpStyle",
        PREFIX + b"warpStylewarpStyle\x00\x00",
        PREFIX + b"warpStylewarpStyle\x00\x00\x00\x09short",
    ],
)
def test_truncated_warp_style(data: bytes) -> None:
    assert TypeToolObjectSetting.frombytes(data).warp_style == ""


def test_fill_color_to_rgba() -> None:
    assert FillColor(1.0, 0.5, 0.25, 0.0).to_rgba() == (128, 64, 0, 255)
    assert FillColor(2.0, -1.0, 0.0, 1.0).to_rgba() == (0, 0, 255, 255)
