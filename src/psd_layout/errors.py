"""
Exceptions raised while decoding a PSD file.

All of them are fatal to :py:meth:`~psd_layout.Document.open`. Problems inside
a layer's extra data records are not raised; they are logged and the reader
skips to the end of the record chain.
"""


class PSDFormatError(ValueError):
    """Base class of fatal format errors."""


class InvalidSignature(PSDFormatError):
    """A mandatory signature (``8BPS``, ``8BIM``) does not match."""


class UnsupportedVersion(PSDFormatError):
    """The file header declares a version other than 1 (PSD)."""


class UnexpectedEOF(PSDFormatError, EOFError):
    """A read ran past the end of the data."""


class InvalidHeader(PSDFormatError):
    """A file header field is out of the supported range, such as depth 32."""
