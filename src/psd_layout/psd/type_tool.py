"""
Type tool object setting (``TySh``) of text layers.

The block embeds action descriptors and the text engine data, a PostScript
like text format. Only a handful of fields are needed here, so instead of
decoding the descriptors the data is scanned for a fixed sequence of markers,
in the order they appear in Photoshop output:

1. ``/Text`` followed by a parenthesized string
2. ``/Justification`` followed by a digit
3. ``/FontSize`` followed by a float
4. ``/FillColor`` then ``/Values [`` followed by alpha, red, green, blue
5. ``/FontSet`` then ``/Name`` followed by a parenthesized string
6. the second ``warpStyle`` key followed by the warp style id

A missing marker leaves the field at its default, and every following marker
is then missing too. Reading a type tool block never fails.
"""

import logging
from typing import Any

from attrs import define, field

from psd_layout.constants import Justification, Tag
from psd_layout.psd.base import BaseElement
from psd_layout.psd.bin_utils import ByteReader
from psd_layout.psd.tagged_blocks import register

logger = logging.getLogger(__name__)


@define
class FillColor:
    """
    Text fill color, each component in [0, 1].
    """

    alpha: float = 1.0
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    def to_rgba(self) -> tuple[int, int, int, int]:
        """Components scaled to 0-255 integers."""
        return tuple(  # type: ignore[return-value]
            max(0, min(255, int(round(value * 255))))
            for value in (self.red, self.green, self.blue, self.alpha)
        )


@register(Tag.TYPE_TOOL_OBJECT_SETTING)
@define(repr=False)
class TypeToolObjectSetting(BaseElement):
    """
    Text metadata of a text layer.

    .. py:attribute:: text

        Text content. Photoshop terminates paragraphs with ``\\r``.

    .. py:attribute:: justification

        See :py:class:`~psd_layout.constants.Justification`.

    .. py:attribute:: font_size

        Point size of the first style run.

    .. py:attribute:: fill_color

        :py:class:`.FillColor` of the first style run.

    .. py:attribute:: font_name

        PostScript name of the first font in the font set.

    .. py:attribute:: warp_style

        Warp style id such as ``warpNone``, empty when absent.
    """

    text: str = ""
    justification: Justification = Justification.LEFT
    font_size: float = 0.0
    fill_color: FillColor = field(factory=FillColor)
    font_name: str = ""
    warp_style: str = ""

    @classmethod
    def read(cls, fp: ByteReader, **kwargs: Any) -> "TypeToolObjectSetting":
        self = cls()

        if not fp.seek_to(b"/Text"):
            logger.debug("No text found in type tool block")
            return self
        self.text = fp.read_descriptor_string()

        if fp.seek_to(b"/Justification"):
            self.justification = _read_justification(fp)

        if fp.seek_to(b"/FontSize "):
            self.font_size = fp.read_descriptor_float()

        if fp.seek_to(b"/FillColor") and fp.seek_to(b"/Values [ "):
            alpha = fp.read_descriptor_float()
            red = fp.read_descriptor_float()
            green = fp.read_descriptor_float()
            blue = fp.read_descriptor_float()
            self.fill_color = FillColor(alpha, red, green, blue)

        if fp.seek_to(b"/FontSet ") and fp.seek_to(b"/Name"):
            self.font_name = fp.read_descriptor_string()

        if fp.seek_to(b"warpStyle") and fp.seek_to(b"warpStyle"):
            self.warp_style = _read_warp_style(fp)

        return self

    def __repr__(self) -> str:
        return "TypeToolObjectSetting(text=%r, font_name=%r, font_size=%g)" % (
            self.text,
            self.font_name,
            self.font_size,
        )


_JUSTIFICATIONS = {
    b"0": Justification.LEFT,
    b"1": Justification.RIGHT,
    b"2": Justification.CENTER,
}


def _read_justification(fp: ByteReader) -> Justification:
    while fp.peek() in (b" ", b"\t", b"\r", b"\n"):
        fp.skip(1)
    if not fp.is_readable():
        return Justification.LEFT
    return _JUSTIFICATIONS.get(fp.read(1), Justification.LEFT)


def _read_warp_style(fp: ByteReader) -> str:
    # Enumerated value: u32 length then the id, or a 4-char id when 0.
    if not fp.is_readable(4):
        return ""
    length = fp.read_u32() or 4
    if not fp.is_readable(length):
        return ""
    return fp.read(length).decode("ascii", "replace")
