"""Routing utilities for classified documents.

The format router maps a document's format family to the decoder that
handles it.
"""

from .format_router import DECODERS, decoder_for, route_document

__all__ = ["DECODERS", "decoder_for", "route_document"]
