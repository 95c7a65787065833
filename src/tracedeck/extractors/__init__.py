"""Format decoders.

Each decoder reads one document family (``pdf``, ``docx``, raster images)
into the common :class:`~tracedeck.models.ExtractedContent` model. They share
a call signature, ``decode(path, fmt, options)``, and are selected by
:mod:`tracedeck.routers.format_router`.
"""

from .pdf import decode_pdf
from .docx_extractor import decode_docx
from .image_extractor import decode_image

__all__ = ["decode_pdf", "decode_docx", "decode_image"]
