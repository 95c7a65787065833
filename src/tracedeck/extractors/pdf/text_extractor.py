from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from ...classifiers.block_classifier import LIST_MARKER
from ...models import LayoutBlock

BBox = Tuple[float, float, float, float]  # (x0, top, x1, bottom)

LINE_TOLERANCE = 3.0      # words whose tops differ by less than this share a line
MIN_BLOCK_GAP = 4.0       # minimum vertical whitespace that separates blocks
GAP_TO_HEIGHT = 0.6       # ... or this fraction of the previous line's height
SIZE_BREAK = 1.0          # font-size change (pt) that starts a new block
_BOLD_TOKENS = ("bold", "black", "heavy", "semibold", "demi")


# -----------------------------
# Utility geometry
# -----------------------------
def _expand(b: BBox, px: float) -> BBox:
    x0, y0, x1, y1 = b
    return (x0 - px, y0 - px, x1 + px, y1 + px)


def _center_inside(word: Dict, region: BBox) -> bool:
    cx = (word["x0"] + word["x1"]) / 2.0
    cy = (word["top"] + word["bottom"]) / 2.0
    x0, y0, x1, y1 = region
    return x0 <= cx <= x1 and y0 <= cy <= y1


def _is_bold(fontname: str) -> bool:
    # Subset fonts look like "ABCDEF+Helvetica-Bold"
    name = fontname.split("+", 1)[-1].lower()
    return any(token in name for token in _BOLD_TOKENS)


@dataclass
class _Line:
    words: List[Dict] = field(default_factory=list)

    @property
    def top(self) -> float:
        return min(w["top"] for w in self.words)

    @property
    def bottom(self) -> float:
        return max(w["bottom"] for w in self.words)

    @property
    def x0(self) -> float:
        return min(w["x0"] for w in self.words)

    @property
    def size(self) -> float:
        return max(float(w.get("size") or 0.0) for w in self.words)

    @property
    def bold(self) -> bool:
        flags = [_is_bold(w.get("fontname") or "") for w in self.words]
        return sum(flags) * 2 > len(flags)

    @property
    def text(self) -> str:
        return " ".join(w["text"] for w in sorted(self.words, key=lambda w: w["x0"]))


def _group_lines(words: Sequence[Dict]) -> List[_Line]:
    lines: List[_Line] = []
    for word in sorted(words, key=lambda w: (round(w["top"], 1), w["x0"])):
        if lines and abs(word["top"] - lines[-1].words[0]["top"]) <= LINE_TOLERANCE:
            lines[-1].words.append(word)
        else:
            lines.append(_Line([word]))
    return lines


def _starts_new_block(prev: _Line, line: _Line) -> bool:
    height = max(prev.bottom - prev.top, 1.0)
    gap = line.top - prev.bottom
    if gap > max(MIN_BLOCK_GAP, GAP_TO_HEIGHT * height):
        return True
    if abs(line.size - prev.size) >= SIZE_BREAK:
        return True
    if line.bold != prev.bold:
        return True
    return bool(LIST_MARKER.match(line.text))


def _to_block(lines: List[_Line], page_number: int, margin: float) -> LayoutBlock:
    text = " ".join(line.text for line in lines)
    sizes = [line.size for line in lines if line.size]
    return LayoutBlock(
        text=text,
        page=page_number,
        font_size=round(sum(sizes) / len(sizes), 2) if sizes else None,
        bold=all(line.bold for line in lines),
        list_item=bool(LIST_MARKER.match(text)),
        indent=round(max(0.0, lines[0].x0 - margin), 2),
    )


def extract_text_blocks(page, masked: Sequence[BBox] = ()) -> List[LayoutBlock]:
    """Group a pdfplumber page's words into paragraph-level layout blocks.

    Words whose centre falls inside a ``masked`` region (tables) are left out.
    Blocks are ordered top to bottom; multi-column pages read row by row.
    """
    words = page.extract_words(
        x_tolerance=2,
        y_tolerance=2,
        keep_blank_chars=False,
        use_text_flow=True,
        extra_attrs=["size", "fontname"],
    ) or []

    regions = [_expand(b, 1.5) for b in masked]
    words = [w for w in words if not any(_center_inside(w, r) for r in regions)]
    if not words:
        return []

    lines = _group_lines(words)
    margin = min(line.x0 for line in lines)

    blocks: List[LayoutBlock] = []
    current: List[_Line] = [lines[0]]
    for line in lines[1:]:
        if _starts_new_block(current[-1], line):
            blocks.append(_to_block(current, page.page_number, margin))
            current = [line]
        else:
            current.append(line)
    blocks.append(_to_block(current, page.page_number, margin))
    return blocks
