"""Data model shared by the decode and structuring stages.

All models are frozen pydantic models so a stage can hand its output to the
next one without defensive copies, and every result can be serialized to the
JSON boundary format and validated back into an equal value.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import JsonError


class DocumentFormat(str, Enum):
    """Closed set of supported input formats, keyed by file extension."""

    PDF = "pdf"
    DOCX = "docx"
    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"
    WEBP = "webp"
    GIF = "gif"


class BlockType(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BULLET = "bullet"
    CAPTION = "caption"
    CONTENT = "content"


class ElementType(str, Enum):
    IMAGE = "image"
    CHART = "chart"
    DIAGRAM = "diagram"


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        use_enum_values=False,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )


# -----------------------------
# Stage 1: extracted content
# -----------------------------
class DocumentMetadata(_Record):
    file_type: DocumentFormat
    file_size: int = Field(ge=0)            # bytes read from disk
    pages: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = None
    author: Optional[str] = None
    created_at: Optional[str] = None        # ISO-8601


class Placement(_Record):
    """Top-left corner of an element on its page, in page units."""

    page: Optional[int] = Field(default=None, ge=1)
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)


class ImageData(_Record):
    id: str
    format: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    data: bytes = b""
    placement: Optional[Placement] = None


class TableData(_Record):
    headers: List[str]
    rows: List[List[str]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _rows_match_headers(self) -> "TableData":
        width = len(self.headers)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"row {index} has {len(row)} cells, expected {width}")
        return self

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[Optional[str]]]) -> Optional["TableData"]:
        """Build a table from raw decoder cells.

        The first row becomes the header. Rows shorter than the header are
        padded with empty cells, longer rows are truncated, and ``None`` cells
        become empty strings. Returns ``None`` for an empty grid.
        """
        cleaned = [[_cell_text(cell) for cell in row] for row in grid if row is not None]
        cleaned = [row for row in cleaned if any(cell for cell in row)]
        if not cleaned:
            return None

        headers = cleaned[0]
        width = len(headers)
        rows = [(row + [""] * width)[:width] for row in cleaned[1:]]
        return cls(headers=headers, rows=rows)


def _cell_text(cell: Optional[str]) -> str:
    if cell is None:
        return ""
    return " ".join(str(cell).split())


class LayoutBlock(_Record):
    """Layout hints the decoder observed for one paragraph-level span."""

    text: str
    page: Optional[int] = Field(default=None, ge=1)
    font_size: Optional[float] = None
    bold: bool = False
    style: Optional[str] = None
    list_item: bool = False
    indent: Optional[float] = None


class ExtractedContent(_Record):
    text: str = ""
    images: List[ImageData] = Field(default_factory=list)
    tables: List[TableData] = Field(default_factory=list)
    metadata: DocumentMetadata
    layout: List[LayoutBlock] = Field(default_factory=list)

    @field_validator("images")
    @classmethod
    def _unique_image_ids(cls, images: List[ImageData]) -> List[ImageData]:
        seen = set()
        for image in images:
            if image.id in seen:
                raise ValueError(f"duplicate image id {image.id!r}")
            seen.add(image.id)
        return images


# -----------------------------
# Stage 2: processed data
# -----------------------------
class TextBlock(_Record):
    content: str
    block_type: BlockType
    confidence: float = Field(ge=0.0, le=1.0)


class VisualElement(_Record):
    element_type: ElementType = ElementType.IMAGE
    position: Tuple[int, int]
    size: Tuple[int, int]
    image_id: Optional[str] = None
    page: Optional[int] = Field(default=None, ge=1)


class Section(_Record):
    title: str
    content_blocks: int = Field(default=0, ge=0)


class DocumentStructure(_Record):
    sections: List[Section] = Field(default_factory=list)
    total_pages: int = Field(default=1, ge=1)
    language: Optional[str] = None


class ProcessedData(_Record):
    text_blocks: List[TextBlock] = Field(default_factory=list)
    visual_elements: List[VisualElement] = Field(default_factory=list)
    structure: DocumentStructure = Field(default_factory=DocumentStructure)


class DocumentResult(_Record):
    """The externally visible result for one document."""

    extracted: ExtractedContent
    processed: ProcessedData
    processing_time_ms: int = Field(ge=0)

    def to_json(self, indent: Optional[int] = None) -> str:
        try:
            return self.model_dump_json(indent=indent)
        except (ValueError, TypeError) as exc:
            raise JsonError(str(exc)) from exc

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_json(cls, payload: str | bytes) -> "DocumentResult":
        try:
            return cls.model_validate_json(payload)
        except ValidationError as exc:
            raise JsonError(str(exc)) from exc


__all__ = [
    "DocumentFormat",
    "BlockType",
    "ElementType",
    "DocumentMetadata",
    "Placement",
    "ImageData",
    "TableData",
    "LayoutBlock",
    "ExtractedContent",
    "TextBlock",
    "VisualElement",
    "Section",
    "DocumentStructure",
    "ProcessedData",
    "DocumentResult",
]
