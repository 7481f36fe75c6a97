import logging
from typing import Any, Sequence

import pytest

from psd_layout.api.layers import Layer, build_layer_tree
from psd_layout.constants import BlendMode, SectionDivider, Tag
from psd_layout.psd.layer_and_mask import LayerRecord
from psd_layout.psd.tagged_blocks import (
    LayerID,
    SectionDividerSetting,
    TaggedBlock,
    TaggedBlocks,
    UnicodeLayerName,
)
from psd_layout.psd.type_tool import TypeToolObjectSetting

GROUP_FLAGS = 8 | 16


def make_layer(
    name: str,
    bbox: tuple = (0, 0, 10, 10),
    flags: int = 0,
    blocks: Sequence[TaggedBlock] = (),
    **kwargs: Any,
) -> Layer:
    top, left, bottom, right = bbox
    record = LayerRecord(
        top=top,
        left=left,
        bottom=bottom,
        right=right,
        name=name,
        flags=flags,
        tagged_blocks=TaggedBlocks(list(blocks)),
        **kwargs,
    )
    return Layer(None, record, [])  # type: ignore[arg-type]


def group(name: str) -> Layer:
    return make_layer(name, bbox=(0, 0, 0, 0), flags=GROUP_FLAGS)


def group_end(name: str = "</Layer group>") -> Layer:
    return make_layer(name, bbox=(0, 0, 0, 0))


def divider(kind: SectionDivider) -> TaggedBlock:
    return TaggedBlock(key=Tag.SECTION_DIVIDER_SETTING, data=SectionDividerSetting(kind))


def names(layers: Sequence[Layer]) -> list:
    return [layer.name for layer in layers]


def test_single_group() -> None:
    # File order is bottom to top.
    layers = [group_end(), make_layer("D"), make_layer("B"), group("A")]
    roots = build_layer_tree(layers)
    assert names(roots) == ["A"]
    assert names(roots[0].children) == ["B", "D"]
    assert roots[0].kind == "group"


def test_nested_groups() -> None:
    layers = [
        make_layer("background"),
        group_end(),
        make_layer("X"),
        group_end("</Layer set>"),
        make_layer("C"),
        group("inner"),
        group("outer"),
        make_layer("top"),
    ]
    roots = build_layer_tree(layers)
    assert names(roots) == ["top", "outer", "background"]
    outer = roots[1]
    assert names(outer.children) == ["inner", "X"]
    assert names(outer.children[0].children) == ["C"]
    assert names(outer.descendants()) == ["inner", "C", "X"]


def test_sibling_groups() -> None:
    layers = [
        group_end(),
        make_layer("b1"),
        group("B"),
        group_end(),
        make_layer("a1"),
        group("A"),
    ]
    roots = build_layer_tree(layers)
    assert names(roots) == ["A", "B"]
    assert names(roots[0].children) == ["a1"]
    assert names(roots[1].children) == ["b1"]


def test_empty_group() -> None:
    roots = build_layer_tree([group_end(), group("empty"), make_layer("top")])
    assert names(roots) == ["top", "empty"]
    assert roots[1].children == ()


def test_copy_marker_ends_group() -> None:
    layers = [make_layer(" copy", bbox=(5, 5, 5, 9)), make_layer("child"), group("G")]
    roots = build_layer_tree(layers)
    assert names(roots) == ["G"]
    assert names(roots[0].children) == ["child"]


def test_section_divider_markers() -> None:
    layers = [
        make_layer(
            "end",
            bbox=(0, 0, 0, 0),
            blocks=[divider(SectionDivider.BOUNDING_SECTION_DIVIDER)],
        ),
        make_layer("child"),
        make_layer("G", bbox=(0, 0, 0, 0), blocks=[divider(SectionDivider.OPEN_FOLDER)]),
    ]
    roots = build_layer_tree(layers)
    assert names(roots) == ["G"]
    assert roots[0].is_group()
    assert layers[0].is_group_end()
    assert names(roots[0].children) == ["child"]


def test_zero_area_layers_are_dropped() -> None:
    layers = [make_layer("empty", bbox=(3, 3, 3, 10)), make_layer("visible")]
    assert names(build_layer_tree(layers)) == ["visible"]


def test_dangling_group_becomes_root() -> None:
    roots = build_layer_tree([make_layer("B"), make_layer("C"), group("A")])
    assert names(roots) == ["A"]
    assert names(roots[0].children) == ["C", "B"]


def test_unclosed_group_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        roots = build_layer_tree([make_layer("B"), group("A"), make_layer("top")])
    assert names(roots) == ["top"]
    assert "is not closed" in caplog.text


def test_unmatched_group_end() -> None:
    roots = build_layer_tree([group_end(), make_layer("A")])
    assert names(roots) == ["A"]


def test_rebuild_is_idempotent() -> None:
    layers = [group_end(), make_layer("B"), group("A")]
    build_layer_tree(layers)
    roots = build_layer_tree(layers)
    assert names(roots[0].children) == ["B"]


def test_layer_properties() -> None:
    layer = make_layer(
        "pascal",
        bbox=(1, 2, 4, 8),
        flags=2 | 1,
        blocks=[
            TaggedBlock(key=Tag.UNICODE_LAYER_NAME, data=UnicodeLayerName("ユニコード")),
            TaggedBlock(key=Tag.LAYER_ID, data=LayerID(5)),
            TaggedBlock(key=Tag.OBJECT_BASED_EFFECTS_LAYER_INFO, data=b""),
        ],
        opacity=100,
        clipping=1,
        blend_mode=BlendMode.SCREEN,
    )
    assert layer.name == "ユニコード"
    assert layer.layer_id == 5
    assert not layer.visible
    assert layer.transparency_protected
    assert layer.opacity == 100
    assert layer.clipping
    assert layer.blend_mode == BlendMode.SCREEN
    assert layer.bbox == (2, 1, 8, 4)
    assert layer.offset == (2, 1)
    assert layer.size == (6, 3)
    assert layer.has_effects()
    assert not layer.has_mask()
    assert layer.mask is None
    assert layer.kind == "pixel"
    assert not layer.is_group()
    assert layer.children == ()


def test_pascal_name_fallback() -> None:
    layer = make_layer("pascal")
    assert layer.name == "pascal"
    assert layer.layer_id is None
    assert layer.visible
    assert not layer.clipping
    assert not layer.has_effects()


def test_type_layer() -> None:
    text = TypeToolObjectSetting(text="Hello", font_name="Arial", font_size=12.0)
    layer = make_layer(
        "Hello",
        blocks=[TaggedBlock(key=Tag.TYPE_TOOL_OBJECT_SETTING, data=text)],
    )
    assert layer.kind == "type"
    assert layer.text.text == "Hello"
    assert layer.text.font_name == "Arial"
