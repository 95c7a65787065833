"""First structuring pass: typed text blocks and a document summary.

Text documents are split into candidate blocks (the decoder's layout blocks
when it supplied them, blank-line separated paragraphs otherwise), each block
is tagged by :func:`~tracedeck.classifiers.block_classifier.classify_block`,
and headings open sections. Images carry no text signal and always produce a
single ``content`` block.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from config.settings import ProcessingSettings
from ..classifiers.block_classifier import BlockContext, classify_block
from ..classifiers.format_classifier import FormatFamily, family_of
from ..models import BlockType, DocumentStructure, ExtractedContent, LayoutBlock, Section, TextBlock
from .language import detect_language

logger = logging.getLogger(__name__)

IMAGE_BLOCK_CONFIDENCE = 0.95

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


@dataclass(frozen=True)
class NormalizedContent:
    text_blocks: List[TextBlock]
    structure: DocumentStructure


def split_paragraphs(text: str) -> List[str]:
    return [segment.strip() for segment in _PARAGRAPH_BREAK.split(text) if segment.strip()]


def classify_blocks(content: ExtractedContent) -> List[TextBlock]:
    if family_of(content.metadata.file_type) is FormatFamily.IMAGE:
        return [TextBlock(content=content.text, block_type=BlockType.CONTENT, confidence=IMAGE_BLOCK_CONFIDENCE)]

    layout: Sequence[Optional[LayoutBlock]]
    if content.layout:
        layout = content.layout
        candidates = [block.text for block in content.layout]
    else:
        candidates = split_paragraphs(content.text)
        layout = [None] * len(candidates)

    context = BlockContext.from_layout(b for b in layout if b is not None)
    blocks: List[TextBlock] = []
    for text, hints in zip(candidates, layout):
        if not text.strip():
            continue
        block_type, confidence = classify_block(text, hints, context)
        blocks.append(TextBlock(content=text.strip(), block_type=block_type, confidence=confidence))
    return blocks


def detect_sections(blocks: Sequence[TextBlock]) -> List[Section]:
    """One section per heading, counting the non-heading blocks under it."""
    sections: List[Section] = []
    title: Optional[str] = None
    count = 0
    for block in blocks:
        if block.block_type is BlockType.HEADING:
            if title is not None:
                sections.append(Section(title=title, content_blocks=count))
            title, count = block.content, 0
        elif title is not None:
            count += 1
    if title is not None:
        sections.append(Section(title=title, content_blocks=count))
    return sections


def normalize(content: ExtractedContent, options: Optional[ProcessingSettings] = None) -> NormalizedContent:
    options = options or ProcessingSettings()
    blocks = classify_blocks(content)
    structure = DocumentStructure(
        sections=detect_sections(blocks),
        total_pages=content.metadata.pages or 1,
        language=detect_language(content.text, options.min_language_words),
    )
    logger.debug(
        "Normalized %d blocks into %d sections (language=%s)",
        len(blocks), len(structure.sections), structure.language,
    )
    return NormalizedContent(text_blocks=blocks, structure=structure)
