"""Top-level package for trace-deck document processing.

PDF, DOCX and common raster image files are decoded into a uniform
:class:`~tracedeck.models.ExtractedContent`, then structured into typed text
blocks, visual elements and a section outline. The package exposes
convenience functions for common operations.
"""

__version__ = "0.1.0"

from .errors import (
    DocumentIOError,
    DocxError,
    FormatMismatchError,
    ImageError,
    JsonError,
    MissingExtensionError,
    ParseError,
    PdfError,
    TraceDeckError,
    UnsupportedFormatError,
)
from .models import (
    BlockType,
    DocumentFormat,
    DocumentMetadata,
    DocumentResult,
    DocumentStructure,
    ElementType,
    ExtractedContent,
    ImageData,
    ProcessedData,
    Section,
    TableData,
    TextBlock,
    VisualElement,
)
from .pipeline import process, process_document, process_document_async

__all__ = [
    "__version__",
    "process",
    "process_document",
    "process_document_async",
    "BlockType",
    "DocumentFormat",
    "DocumentMetadata",
    "DocumentResult",
    "DocumentStructure",
    "ElementType",
    "ExtractedContent",
    "ImageData",
    "ProcessedData",
    "Section",
    "TableData",
    "TextBlock",
    "VisualElement",
    "TraceDeckError",
    "DocumentIOError",
    "UnsupportedFormatError",
    "ParseError",
    "MissingExtensionError",
    "FormatMismatchError",
    "PdfError",
    "DocxError",
    "ImageError",
    "JsonError",
]
