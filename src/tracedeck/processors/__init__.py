"""Structuring stage.

``normalizer`` classifies text blocks and summarizes the document;
``structurer`` adds visual elements and assembles :class:`ProcessedData`.
"""

from .normalizer import NormalizedContent, classify_blocks, detect_sections, normalize, split_paragraphs
from .language import detect_language
from .structurer import place_visual, structure

__all__ = [
    "NormalizedContent",
    "classify_blocks",
    "detect_sections",
    "detect_language",
    "normalize",
    "split_paragraphs",
    "place_visual",
    "structure",
]
