"""DOCX decoder.

Reads the WordprocessingML package directly: ``word/document.xml`` for
paragraphs and tables in body order, ``word/_rels/document.xml.rels`` and
``word/media/`` for embedded images, and ``docProps/core.xml`` for title,
author and creation date. Page count is never reported; it depends on a
layout pass Word performs at render time.
"""
from __future__ import annotations

import io
import logging
import posixpath
import zipfile
import zlib
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union
from xml.etree import ElementTree as ET

from PIL import Image, UnidentifiedImageError

from config.settings import ProcessingSettings
from ..errors import DocxError
from ..models import DocumentFormat, DocumentMetadata, ExtractedContent, ImageData, LayoutBlock, TableData
from ..utils.io_utils import read_document_bytes

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
RELS_PART = "word/_rels/document.xml.rels"
CORE_PART = "docProps/core.xml"
MEDIA_PREFIX = "word/media/"

NS = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "v": "urn:schemas-microsoft-com:vml",
    "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
    "cp": "http://schemas.openxmlformats.org/package/2006/metadata/core-properties",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
}

TWIPS_PER_POINT = 20.0


def _w(tag: str) -> str:
    return f"{{{NS['w']}}}{tag}"


def _r(attr: str) -> str:
    return f"{{{NS['r']}}}{attr}"


def _on(element: Optional[ET.Element]) -> bool:
    """True for a present toggle property (``<w:b/>``) unless explicitly off."""
    if element is None:
        return False
    return element.get(_w("val"), "true").lower() not in ("0", "false", "off", "none")


# -----------------------------
# Body walking
# -----------------------------
def _body_children(body: ET.Element) -> Iterator[ET.Element]:
    """Yield paragraphs and tables in order, unwrapping content controls."""
    for child in body:
        if child.tag == _w("sdt"):
            content = child.find("w:sdtContent", NS)
            if content is not None:
                yield from _body_children(content)
        elif child.tag in (_w("p"), _w("tbl")):
            yield child


def _paragraph_text(paragraph: ET.Element) -> str:
    parts: List[str] = []
    # w:tab under w:pPr is a tab stop definition, only run content counts
    for run in paragraph.iter(_w("r")):
        for node in run:
            if node.tag == _w("t"):
                parts.append(node.text or "")
            elif node.tag == _w("tab"):
                parts.append("\t")
            elif node.tag in (_w("br"), _w("cr")):
                parts.append("\n")
    return "".join(parts).strip()


def _paragraph_bold(paragraph: ET.Element) -> bool:
    runs = [run for run in paragraph.iter(_w("r")) if (run.findtext("w:t", default="", namespaces=NS)).strip()]
    if not runs:
        return False
    # Paragraph-mark run properties count as the default for every run
    default = _on(paragraph.find("w:pPr/w:rPr/w:b", NS))
    for run in runs:
        run_bold = run.find("w:rPr/w:b", NS)
        if not (_on(run_bold) if run_bold is not None else default):
            return False
    return True


def _paragraph_block(paragraph: ET.Element, text: str) -> LayoutBlock:
    ppr = paragraph.find("w:pPr", NS)
    style = None
    list_item = False
    indent = None
    if ppr is not None:
        style_el = ppr.find("w:pStyle", NS)
        if style_el is not None:
            style = style_el.get(_w("val"))
        list_item = ppr.find("w:numPr", NS) is not None
        ind = ppr.find("w:ind", NS)
        if ind is not None:
            left = ind.get(_w("left")) or ind.get(_w("start"))
            if left and left.lstrip("-").isdigit():
                indent = int(left) / TWIPS_PER_POINT
    return LayoutBlock(text=text, style=style, list_item=list_item, bold=_paragraph_bold(paragraph), indent=indent)


def _table_grid(table: ET.Element) -> List[List[str]]:
    grid: List[List[str]] = []
    for tr in table.findall("w:tr", NS):
        row: List[str] = []
        for tc in tr.findall("w:tc", NS):
            text = " ".join(t for t in (_paragraph_text(p) for p in tc.iter(_w("p"))) if t)
            row.append(text)
            span = tc.find("w:tcPr/w:gridSpan", NS)
            if span is not None and (span.get(_w("val")) or "").isdigit():
                # Horizontally merged cells keep their grid columns as empty cells
                row.extend([""] * (int(span.get(_w("val"))) - 1))
        grid.append(row)
    return grid


def _image_refs(element: ET.Element) -> Iterator[str]:
    for blip in element.iter(f"{{{NS['a']}}}blip"):
        rid = blip.get(_r("embed")) or blip.get(_r("link"))
        if rid:
            yield rid
    for imagedata in element.iter(f"{{{NS['v']}}}imagedata"):
        rid = imagedata.get(_r("id"))
        if rid:
            yield rid


# -----------------------------
# Package parts
# -----------------------------
def _relationships(archive: zipfile.ZipFile) -> Dict[str, str]:
    """Map relationship id -> archive member name for internal targets."""
    try:
        root = ET.fromstring(archive.read(RELS_PART))
    except KeyError:
        return {}
    targets: Dict[str, str] = {}
    for rel in root.findall("rel:Relationship", NS):
        if rel.get("TargetMode") == "External":
            continue
        target = rel.get("Target") or ""
        if target.startswith("/"):
            member = target.lstrip("/")
        else:
            member = posixpath.normpath(posixpath.join("word", target))
        targets[rel.get("Id", "")] = member
    return targets


def _core_properties(archive: zipfile.ZipFile) -> Dict[str, Optional[str]]:
    try:
        root = ET.fromstring(archive.read(CORE_PART))
    except KeyError:
        return {"title": None, "author": None, "created_at": None}

    def text(path: str) -> Optional[str]:
        value = root.findtext(path, default="", namespaces=NS).strip()
        return value or None

    return {
        "title": text("dc:title"),
        "author": text("dc:creator"),
        "created_at": text("dcterms:created"),
    }


def _decode_media(archive: zipfile.ZipFile, members: List[str], include_data: bool) -> List[ImageData]:
    images: List[ImageData] = []
    for member in members:
        payload = archive.read(member)
        try:
            with Image.open(io.BytesIO(payload)) as img:
                width, height = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            logger.warning("Skipping embedded media %s: %s", member, exc)
            continue
        if width <= 0 or height <= 0:
            continue
        images.append(
            ImageData(
                id=f"img_{len(images)}",
                format=posixpath.splitext(member)[1].lstrip(".").lower() or "raw",
                width=width,
                height=height,
                data=payload if include_data else b"",
            )
        )
    return images


def _ordered_media(archive: zipfile.ZipFile, referenced: List[str]) -> List[str]:
    """Media members in order of first reference, then any unreferenced ones."""
    present = set(archive.namelist())
    ordered: List[str] = []
    for member in referenced:
        if member in present and member.startswith(MEDIA_PREFIX) and member not in ordered:
            ordered.append(member)
    for member in sorted(present):
        if member.startswith(MEDIA_PREFIX) and not member.endswith("/") and member not in ordered:
            ordered.append(member)
    return ordered


def _parse_document(archive: zipfile.ZipFile, with_tables: bool) -> Tuple[List[LayoutBlock], List[TableData], List[str]]:
    root = ET.fromstring(archive.read(DOCUMENT_PART))
    body = root.find("w:body", NS)
    if body is None:
        raise DocxError(f"{DOCUMENT_PART} has no w:body element")

    rels = _relationships(archive)
    blocks: List[LayoutBlock] = []
    tables: List[TableData] = []
    referenced: List[str] = []

    for element in _body_children(body):
        referenced.extend(rels[rid] for rid in _image_refs(element) if rid in rels)
        if element.tag == _w("tbl"):
            if with_tables:
                table = TableData.from_grid(_table_grid(element))
                if table is not None:
                    tables.append(table)
            continue
        text = _paragraph_text(element)
        if text:
            blocks.append(_paragraph_block(element, text))
    return blocks, tables, referenced


def decode_docx(path: Union[str, Path], fmt: DocumentFormat = DocumentFormat.DOCX,
                options: Optional[ProcessingSettings] = None) -> ExtractedContent:
    """Decode a DOCX file into :class:`ExtractedContent`."""
    options = options or ProcessingSettings()
    data = read_document_bytes(path)

    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            blocks, tables, referenced = _parse_document(archive, options.extract_tables)
            images = _decode_media(archive, _ordered_media(archive, referenced), options.include_image_data)
            core = _core_properties(archive)
    except zipfile.BadZipFile as exc:
        raise DocxError(f"not a zip container: {exc}") from exc
    except KeyError as exc:
        raise DocxError(f"missing package part {exc}") from exc
    except ET.ParseError as exc:
        raise DocxError(f"malformed XML: {exc}") from exc
    except (zipfile.LargeZipFile, zlib.error, EOFError, OSError) as exc:
        raise DocxError(f"corrupt archive member: {exc}") from exc
    except (RuntimeError, NotImplementedError) as exc:
        # encrypted members or an unsupported compression method
        raise DocxError(f"unreadable archive member: {exc}") from exc

    logger.debug("Decoded %s: %d paragraphs, %d tables, %d images", path, len(blocks), len(tables), len(images))
    return ExtractedContent(
        text="\n\n".join(block.text for block in blocks),
        images=images,
        tables=tables,
        layout=blocks,
        metadata=DocumentMetadata(
            file_type=fmt,
            file_size=len(data),
            pages=None,
            title=core["title"],
            author=core["author"],
            created_at=core["created_at"],
        ),
    )
