import pytest

from psd_layout.psd.base import IntegerElement, ListElement, StringElement, ValueElement
from psd_layout.psd.color_mode_data import ColorModeData

from ..utils import pack, unicode_string


@pytest.mark.parametrize("fixture", ["", "a", "456", "ユニコード"])
def test_string(fixture: str) -> None:
    value = StringElement.frombytes(unicode_string(fixture))
    assert value == fixture
    assert value == StringElement(fixture)
    assert str(value) == fixture
    assert hash(value) == hash(fixture)
    assert repr(value) == "StringElement(%r)" % fixture


def test_integer() -> None:
    value = IntegerElement.frombytes(pack("I", 7))
    assert value == 7
    assert int(value) == 7
    assert [0, 1, 2, 3, 4, 5, 6, 7][value] == 7
    assert hash(value) == hash(7)
    assert bool(value)
    assert not IntegerElement(0)


def test_bytes_repr_is_trimmed() -> None:
    assert repr(ValueElement(b"abc")) == "ValueElement(b'abc')"
    assert repr(ColorModeData(b"\x00" * 768)) == (
        "ColorModeData(%r ... =768)" % (b"\x00" * 16)
    )


def test_list() -> None:
    value = ListElement(["a", "b"])
    assert len(value) == 2
    assert list(value) == ["a", "b"]
    assert value[1] == "b"
    assert value[:1] == ["a"]
    assert repr(value) == "ListElement(['a', 'b'])"
