"""Error hierarchy for the document pipeline.

Every failure raised by the core derives from :class:`TraceDeckError`, so
callers (CLI, batch runner) can treat a document as failed with a single
``except`` clause. Library exceptions are chained as ``__cause__``.
"""
from __future__ import annotations


class TraceDeckError(Exception):
    """Base class for all pipeline failures."""

    prefix = "Error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.prefix}: {self.detail}"


class DocumentIOError(TraceDeckError):
    """The source file could not be found, read, or is too large."""

    prefix = "IO error"


class UnsupportedFormatError(TraceDeckError):
    """The file extension is not one of the supported formats."""

    prefix = "Unsupported format"

    def __init__(self, extension: str) -> None:
        super().__init__(extension)
        self.extension = extension


class ParseError(TraceDeckError):
    prefix = "Parse error"


class MissingExtensionError(ParseError):
    """The path carries no extension at all."""

    def __init__(self, path: str) -> None:
        super().__init__("No file extension")
        self.path = path


class FormatMismatchError(ParseError):
    """The extension and the sniffed file signature disagree."""

    def __init__(self, declared: str, detected: str) -> None:
        super().__init__(f"extension says {declared!r} but file content looks like {detected!r}")
        self.declared = declared
        self.detected = detected


class PdfError(TraceDeckError):
    prefix = "PDF error"


class DocxError(TraceDeckError):
    prefix = "DOCX error"


class ImageError(TraceDeckError):
    prefix = "Image error"


class JsonError(TraceDeckError):
    prefix = "JSON error"


__all__ = [
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
