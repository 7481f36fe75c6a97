"""
High-level API: :py:class:`~psd_layout.api.document.Document` and its
layers.
"""
