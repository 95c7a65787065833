from __future__ import annotations

import re
from dataclasses import dataclass
from statistics import median
from typing import Iterable, Optional, Tuple

from ..models import BlockType, LayoutBlock

# -----------------------------
# Cues
# -----------------------------
LIST_MARKER = re.compile(r"^\s*(?:[-*+•▪◦–]|\d{1,3}[.)]|[a-zA-Z][.)]|\([a-zA-Z0-9]{1,3}\))\s+")
_CAPTION_CUE = re.compile(r"^\s*(?:figure|fig\.|table|chart|diagram|image|plate|exhibit)\s*\d+[a-z]?\s*[:.\-–]", re.IGNORECASE)
_NUMBERED_HEADING = re.compile(r"^\s*(?:\d+(?:\.\d+)*\.?|[IVXLC]+\.)\s+\S")
_TERMINAL_PUNCT = (".", ";", ",", ":", "?", "!")

HEADING_MAX_WORDS = 14
HEADING_SIZE_RATIO = 1.15

# Confidence per signal
STYLE_CONFIDENCE = 0.95
LIST_CONFIDENCE = 0.9
CAPTION_CONFIDENCE = 0.85
FONT_SIZE_CONFIDENCE = 0.8
EMPHASIS_CONFIDENCE = 0.65
LONG_PARAGRAPH_CONFIDENCE = 0.75
SHORT_PARAGRAPH_CONFIDENCE = 0.6


@dataclass(frozen=True)
class BlockContext:
    """Document-wide facts a single block is judged against."""

    body_font_size: Optional[float] = None

    @classmethod
    def from_layout(cls, blocks: Iterable[LayoutBlock]) -> "BlockContext":
        # Body size is the median weighted by characters, so a few large headings do not skew it
        sizes = []
        for block in blocks:
            if block.font_size:
                sizes.extend([block.font_size] * max(1, len(block.text)))
        return cls(body_font_size=median(sizes) if sizes else None)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _looks_like_title(text: str) -> bool:
    words = text.split()
    return 0 < len(words) <= HEADING_MAX_WORDS and not text.rstrip().endswith(_TERMINAL_PUNCT)


def _style_type(style: str) -> Optional[BlockType]:
    name = style.replace(" ", "").lower()
    if name.startswith("heading") or name in ("title", "subtitle"):
        return BlockType.HEADING
    if name.startswith("caption"):
        return BlockType.CAPTION
    if name.startswith("list") or name.startswith("bullet"):
        return BlockType.BULLET
    return None


def classify_block(text: str, layout: Optional[LayoutBlock] = None,
                   context: BlockContext = BlockContext()) -> Tuple[BlockType, float]:
    """Return ``(block_type, confidence)`` for one candidate block.

    Signals are tried strongest first: explicit paragraph style, list
    numbering or markers, caption prefixes, font size against the body size,
    then bold or all-caps short lines. Anything else is a paragraph.
    """
    stripped = text.strip()

    if layout is not None and layout.style:
        styled = _style_type(layout.style)
        if styled is not None:
            return styled, STYLE_CONFIDENCE

    if (layout is not None and layout.list_item) or LIST_MARKER.match(stripped):
        return BlockType.BULLET, LIST_CONFIDENCE

    if _CAPTION_CUE.match(stripped):
        return BlockType.CAPTION, CAPTION_CONFIDENCE

    if _looks_like_title(stripped):
        if layout is not None and layout.font_size and context.body_font_size:
            ratio = layout.font_size / context.body_font_size
            if ratio >= HEADING_SIZE_RATIO:
                # Larger gap from body size, more certain
                return BlockType.HEADING, _clamp(FONT_SIZE_CONFIDENCE + min(0.15, (ratio - HEADING_SIZE_RATIO) * 0.2))
        if layout is not None and layout.bold:
            return BlockType.HEADING, EMPHASIS_CONFIDENCE
        letters = [ch for ch in stripped if ch.isalpha()]
        if len(letters) >= 3 and all(ch.isupper() for ch in letters):
            return BlockType.HEADING, EMPHASIS_CONFIDENCE
        if _NUMBERED_HEADING.match(stripped) and len(stripped.split()) <= 8:
            return BlockType.HEADING, EMPHASIS_CONFIDENCE

    if len(stripped.split()) >= HEADING_MAX_WORDS:
        return BlockType.PARAGRAPH, LONG_PARAGRAPH_CONFIDENCE
    return BlockType.PARAGRAPH, SHORT_PARAGRAPH_CONFIDENCE
