"""Classifier utilities for document processing.

``format_classifier`` decides which decoder a file goes to;
``block_classifier`` tags decoded text blocks as headings, bullets,
captions or paragraphs.
"""

from .format_classifier import FormatFamily, classify, family_of, sniff_format, verify_signature
from .block_classifier import BlockContext, classify_block

__all__ = [
    "FormatFamily",
    "classify",
    "family_of",
    "sniff_format",
    "verify_signature",
    "BlockContext",
    "classify_block",
]
