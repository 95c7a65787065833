"""Utility helpers: file checks, logging setup and console formatting.

The batch runner depends on the pipeline and is imported from
:mod:`tracedeck.utils.batch` directly.
"""

from .io_utils import check_readable, read_document_bytes
from .formatting import format_duration, format_size
from .logging_config import configure_logging

__all__ = [
    "check_readable",
    "read_document_bytes",
    "format_duration",
    "format_size",
    "configure_logging",
]
