"""
Base data structures intended for inheritance.

Every section of a PSD file is modeled by a subclass of
:py:class:`BaseElement` decorated with attrs_, and implements
:py:meth:`BaseElement.read` on top of a
:py:class:`~psd_layout.psd.bin_utils.ByteReader`.

.. _attrs: https://www.attrs.org/en/stable/index.html
"""

import logging
from typing import Any, TypeVar

from attrs import define, field

from psd_layout.psd.bin_utils import ByteReader, trimmed_repr

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseElement")


class BaseElement:
    """
    Base element of the PSD sections and records.

    .. py:classmethod:: read(cls, fp, **kwargs)

        Read the element at the cursor of a
        :py:class:`~psd_layout.psd.bin_utils.ByteReader`.

    .. py:classmethod:: frombytes(cls, data, **kwargs)

        Read the element from a standalone payload, such as the data of a
        tagged block or an image resource.
    """

    @classmethod
    def read(cls: type[T], fp: ByteReader, **kwargs: Any) -> T:
        raise NotImplementedError()

    @classmethod
    def frombytes(cls: type[T], data: bytes, *args: Any, **kwargs: Any) -> T:
        return cls.read(ByteReader(data), *args, **kwargs)


@define(repr=False, eq=False, order=False)
class ValueElement(BaseElement):
    """
    Element wrapping a single decoded value. It compares and hashes like the
    wrapped value, so ``tagged_blocks.get_data(Tag.LAYER_ID) == 3`` holds.
    """

    value: object = None

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ValueElement):
            other = other.value
        return self.value == other

    def __hash__(self) -> int:
        return hash(self.value)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __repr__(self) -> str:
        if isinstance(self.value, bytes):
            return "%s(%s)" % (self.__class__.__name__, trimmed_repr(self.value))
        return "%s(%r)" % (self.__class__.__name__, self.value)


@define(repr=False, eq=False, order=False)
class IntegerElement(ValueElement):
    """
    Unsigned 32-bit integer payload, such as a layer id.
    """

    value: int = field(default=0, converter=int)

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    @classmethod
    def read(cls: type[T], fp: ByteReader, **kwargs: Any) -> T:
        return cls(fp.read_u32())  # type: ignore[call-arg]


@define(repr=False, eq=False, order=False)
class StringElement(ValueElement):
    """
    Unicode string payload with a u32 code unit count.
    """

    value: str = ""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def read(cls: type[T], fp: ByteReader, **kwargs: Any) -> T:
        return cls(fp.read_unicode_string())  # type: ignore[call-arg]


@define(repr=False)
class ListElement(BaseElement):
    """
    Ordered sequence of records, such as image resources or tagged blocks.
    """

    _items: list = field(factory=list, converter=list)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Any:
        return iter(self._items)

    def __getitem__(self, key: Any) -> Any:
        return self._items[key]

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self._items)
