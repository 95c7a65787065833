"""PDF decoder.

Text and tables come from ``pdfplumber`` (word geometry and ruling lines),
embedded images, page count and the information dictionary from
``pymupdf``. The file is read once and both libraries parse the same bytes.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pdfplumber
import pymupdf
from pdfminer.pdfdocument import PDFPasswordIncorrect
from pdfminer.pdfparser import PDFSyntaxError

from config.settings import ProcessingSettings
from ...errors import PdfError, TraceDeckError
from ...models import DocumentFormat, DocumentMetadata, ExtractedContent, LayoutBlock, TableData
from ...utils.io_utils import read_document_bytes
from .image_extractor import extract_images
from .metadata_extractor import extract_metadata
from .table_extractor import extract_tables
from .text_extractor import extract_text_blocks

logger = logging.getLogger(__name__)


def _open_pymupdf(data: bytes) -> pymupdf.Document:
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except (pymupdf.FileDataError, RuntimeError, ValueError) as exc:
        raise PdfError(f"cannot open document: {exc}") from exc
    if doc.needs_pass:
        doc.close()
        raise PdfError("document is encrypted")
    if doc.page_count < 1:
        doc.close()
        raise PdfError("document has no pages")
    return doc


def _read_layout(data: bytes, *, with_tables: bool) -> Tuple[List[LayoutBlock], List[TableData]]:
    blocks: List[LayoutBlock] = []
    tables: List[TableData] = []
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                regions = []
                if with_tables:
                    page_tables, regions = extract_tables(page)
                    tables.extend(page_tables)
                blocks.extend(extract_text_blocks(page, regions))
    except (PDFSyntaxError, PDFPasswordIncorrect) as exc:
        raise PdfError(f"malformed content: {exc}") from exc
    except TraceDeckError:
        raise
    except Exception as exc:
        # pdfplumber wraps pdfminer failures in its own exception types
        raise PdfError(f"cannot read page content: {exc}") from exc
    return blocks, tables


def decode_pdf(path: Union[str, Path], fmt: DocumentFormat = DocumentFormat.PDF,
               options: Optional[ProcessingSettings] = None) -> ExtractedContent:
    """Decode a PDF file into :class:`ExtractedContent`."""
    options = options or ProcessingSettings()
    data = read_document_bytes(path)

    doc = _open_pymupdf(data)
    try:
        meta = extract_metadata(doc)
        images = extract_images(doc, include_data=options.include_image_data)
    except (RuntimeError, ValueError) as exc:
        raise PdfError(f"cannot read document structure: {exc}") from exc
    finally:
        doc.close()

    blocks, tables = _read_layout(data, with_tables=options.extract_tables)

    logger.debug(
        "Decoded %s: %s pages, %d blocks, %d tables, %d images",
        path, meta["pages"], len(blocks), len(tables), len(images),
    )
    return ExtractedContent(
        text="\n\n".join(block.text for block in blocks),
        images=images,
        tables=tables,
        layout=blocks,
        metadata=DocumentMetadata(
            file_type=fmt,
            file_size=len(data),
            pages=meta["pages"],
            title=meta["title"],
            author=meta["author"],
            created_at=meta["created_at"],
        ),
    )
