"""Route a classified document to its decoder.

Dispatch is a plain table from :class:`FormatFamily` to a decoder function;
all decoders share the ``(path, fmt, options) -> ExtractedContent`` contract.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from config.settings import ProcessingSettings
from ..classifiers.format_classifier import FormatFamily, family_of
from ..extractors import decode_docx, decode_image, decode_pdf
from ..models import DocumentFormat, ExtractedContent

logger = logging.getLogger(__name__)

Decoder = Callable[[Union[str, Path], DocumentFormat, Optional[ProcessingSettings]], ExtractedContent]

DECODERS: Dict[FormatFamily, Decoder] = {
    FormatFamily.PDF: decode_pdf,
    FormatFamily.DOCX: decode_docx,
    FormatFamily.IMAGE: decode_image,
}


def decoder_for(fmt: DocumentFormat) -> Decoder:
    return DECODERS[family_of(fmt)]


def route_document(path: Union[str, Path], fmt: DocumentFormat,
                   options: Optional[ProcessingSettings] = None) -> ExtractedContent:
    """Decode ``path`` with the decoder registered for ``fmt``'s family."""
    decoder = decoder_for(fmt)
    logger.debug("Routing %s (%s) to %s", path, fmt.value, decoder.__name__)
    return decoder(path, fmt, options)
