"""Map a file path to a supported document format.

Classification is driven by the file extension. :func:`verify_signature`
adds a magic-byte check on top so a ``.pdf`` that is really a PNG is
rejected before any decoder touches it.
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

import filetype

from ..errors import DocumentIOError, FormatMismatchError, MissingExtensionError, UnsupportedFormatError
from ..models import DocumentFormat

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SIGNATURE_BYTES = 8192


class FormatFamily(str, Enum):
    """Decoder families; every format belongs to exactly one."""

    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"


FORMAT_FAMILIES: Dict[DocumentFormat, FormatFamily] = {
    DocumentFormat.PDF: FormatFamily.PDF,
    DocumentFormat.DOCX: FormatFamily.DOCX,
    DocumentFormat.PNG: FormatFamily.IMAGE,
    DocumentFormat.JPG: FormatFamily.IMAGE,
    DocumentFormat.JPEG: FormatFamily.IMAGE,
    DocumentFormat.WEBP: FormatFamily.IMAGE,
    DocumentFormat.GIF: FormatFamily.IMAGE,
}

FORMAT_DESCRIPTIONS: Dict[DocumentFormat, str] = {
    DocumentFormat.PDF: "Portable Document Format",
    DocumentFormat.DOCX: "Microsoft Word Document",
    DocumentFormat.PNG: "Portable Network Graphics",
    DocumentFormat.JPG: "Joint Photographic Experts Group",
    DocumentFormat.JPEG: "Joint Photographic Experts Group",
    DocumentFormat.WEBP: "Modern Web Image Format",
    DocumentFormat.GIF: "Graphics Interchange Format",
}

# mime types reported by `filetype` -> the format they prove
_MIME_FORMATS: Dict[str, DocumentFormat] = {
    "application/pdf": DocumentFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.DOCX,
    "application/zip": DocumentFormat.DOCX,
    "image/png": DocumentFormat.PNG,
    "image/jpeg": DocumentFormat.JPEG,
    "image/webp": DocumentFormat.WEBP,
    "image/gif": DocumentFormat.GIF,
}

_EQUIVALENT = {DocumentFormat.JPG: DocumentFormat.JPEG}


def family_of(fmt: DocumentFormat) -> FormatFamily:
    return FORMAT_FAMILIES[fmt]


def classify(path: PathLike) -> DocumentFormat:
    """Return the :class:`DocumentFormat` declared by ``path``'s extension.

    The lookup is case-insensitive. Raises :class:`MissingExtensionError`
    when there is no extension and :class:`UnsupportedFormatError` when the
    extension is not supported.
    """
    suffix = Path(path).suffix
    if not suffix or suffix == ".":
        raise MissingExtensionError(str(path))

    extension = suffix[1:].lower()
    try:
        return DocumentFormat(extension)
    except ValueError:
        raise UnsupportedFormatError(extension) from None


def sniff_format(path: PathLike) -> Optional[DocumentFormat]:
    """Guess the format from the file's leading bytes, ``None`` if unknown."""
    try:
        with open(path, "rb") as fh:
            header = fh.read(SIGNATURE_BYTES)
    except OSError as exc:
        raise DocumentIOError(f"{path}: {exc.strerror or exc}") from exc

    kind = filetype.guess(header)
    if kind is None or not kind.mime:
        return None
    return _MIME_FORMATS.get(kind.mime.lower())


def verify_signature(path: PathLike, declared: DocumentFormat) -> None:
    """Raise :class:`FormatMismatchError` if the content belongs to another format family.

    Unknown signatures pass; the decoder reports those as parse failures.
    """
    detected = sniff_format(path)
    if detected is None:
        logger.debug("No recognizable signature in %s, deferring to %s decoder", path, declared.value)
        return

    if family_of(declared) is not family_of(detected):
        raise FormatMismatchError(declared.value, detected.value)
    if _EQUIVALENT.get(declared, declared) != _EQUIVALENT.get(detected, detected):
        logger.debug("%s is %s data under a .%s name", path, detected.value, declared.value)
