"""
psd-layout: read Adobe Photoshop PSD files into a layer document model.

Basic usage::

    from psd_layout import Document

    doc = Document.open('example.psd')

    # Iterate through root layers and groups
    for layer in doc:
        print(layer.name, layer.kind)

    # Export the merged image to PNG
    doc.topil().save('output.png')

Architecture:

- :py:mod:`psd_layout.psd`: Low-level binary structure parsing
- :py:mod:`psd_layout.api`: High-level document and layer API
- :py:mod:`psd_layout.compression`: Channel decompression codecs (RLE, ZIP)
"""

from psd_layout.api.document import Document
from psd_layout.version import __version__

__all__ = ["Document", "__version__"]
