"""Result assembler: the single entry point for processing one document.

``process_document`` runs classify -> decode -> normalize -> structure and
times the whole run. Any failure propagates unchanged; a partial
:class:`DocumentResult` is never returned.
"""
from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional, Union

from config.settings import ProcessingSettings, settings
from .classifiers.format_classifier import classify, verify_signature
from .models import DocumentResult
from .processors.normalizer import normalize
from .processors.structurer import structure
from .routers.format_router import route_document
from .utils.io_utils import check_readable

logger = logging.getLogger(__name__)


def process_document(path: Union[str, Path], options: Optional[ProcessingSettings] = None) -> DocumentResult:
    """Process a PDF, DOCX or image file into a :class:`DocumentResult`.

    Raises a :class:`~tracedeck.errors.TraceDeckError` subclass on failure:
    ``DocumentIOError`` before any decoding when the file is missing or
    unreadable, ``ParseError``/``UnsupportedFormatError`` from
    classification (checked first), and the decoder-specific error when parsing fails.
    """
    options = options or settings.processing
    start = time.perf_counter()

    fmt = classify(path)
    check_readable(path, options.max_file_size_mb)
    if options.verify_signature:
        verify_signature(path, fmt)

    extracted = route_document(path, fmt, options)
    normalized = normalize(extracted, options)
    processed = structure(extracted, normalized, options)

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    logger.info("Processed %s (%s) in %d ms", path, fmt.value, elapsed_ms)
    return DocumentResult(extracted=extracted, processed=processed, processing_time_ms=elapsed_ms)


process = process_document


async def process_document_async(path: Union[str, Path], options: Optional[ProcessingSettings] = None) -> DocumentResult:
    """Run :func:`process_document` in a worker thread."""
    return await asyncio.to_thread(process_document, path, options)
