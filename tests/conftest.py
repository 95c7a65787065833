import io
import struct
import zipfile
import zlib
from pathlib import Path

import pymupdf
import pytest
from PIL import Image

from config.settings import ProcessingSettings

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="xml" ContentType="application/xml"/>
  <Default Extension="png" ContentType="image/png"/>
  <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

PACKAGE_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

DOCUMENT_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId5" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/image" Target="media/image1.png"/>
  <Relationship Id="rId9" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink" Target="https://example.com" TargetMode="External"/>
</Relationships>"""

CORE_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
  xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:dcterms="http://purl.org/dc/terms/"
  xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <dc:title>Field Notes</dc:title>
  <dc:creator>A. Writer</dc:creator>
  <dcterms:created xsi:type="dcterms:W3CDTF">2024-03-01T10:00:00Z</dcterms:created>
</cp:coreProperties>"""


def _para(text, style=None, numbered=False, bold=False):
    ppr = ""
    if style or numbered:
        inner = f'<w:pStyle w:val="{style}"/>' if style else ""
        if numbered:
            inner += '<w:numPr><w:ilvl w:val="0"/><w:numId w:val="1"/></w:numPr>'
        ppr = f"<w:pPr>{inner}</w:pPr>"
    rpr = "<w:rPr><w:b/></w:rPr>" if bold else ""
    return f"<w:p>{ppr}<w:r>{rpr}<w:t xml:space=\"preserve\">{text}</w:t></w:r></w:p>"


def _table(rows):
    cells = "".join(
        "<w:tr>" + "".join(f"<w:tc><w:p><w:r><w:t>{c}</w:t></w:r></w:p></w:tc>" for c in row) + "</w:tr>"
        for row in rows
    )
    return f"<w:tbl>{cells}</w:tbl>"


IMAGE_PARAGRAPH = (
    f'<w:p><w:r><w:drawing><a:graphic xmlns:a="{A_NS}"><a:graphicData>'
    f'<a:blip r:embed="rId5"/></a:graphicData></a:graphic></w:drawing></w:r></w:p>'
)

BODY_TEXT = (
    "The survey covered the northern district and the results of the first week "
    "are summarised in the table below for the team."
)


def build_docx(body_xml, media=None, core=True):
    """Assemble a minimal WordprocessingML package in memory."""
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}" xmlns:r="{R_NS}"><w:body>{body_xml}</w:body></w:document>'
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES)
        archive.writestr("_rels/.rels", PACKAGE_RELS)
        archive.writestr("word/document.xml", document)
        archive.writestr("word/_rels/document.xml.rels", DOCUMENT_RELS)
        if core:
            archive.writestr("docProps/core.xml", CORE_XML)
        for name, payload in (media or {}).items():
            archive.writestr(name, payload)
    return buffer.getvalue()


def png_bytes(width=100, height=200, color="white"):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def _png_chunk(tag, data):
    return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)


def huge_png_header(width=20000, height=20000):
    """A PNG whose header declares more pixels than Pillow will open."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b"\x00" * 16))
        + _png_chunk(b"IEND", b"")
    )


@pytest.fixture
def options():
    return ProcessingSettings()


@pytest.fixture
def png_file(tmp_path) -> Path:
    path = tmp_path / "sample.png"
    path.write_bytes(png_bytes(100, 200))
    return path


@pytest.fixture
def docx_file(tmp_path) -> Path:
    body = "".join([
        _para("Introduction", style="Heading1"),
        _para(BODY_TEXT),
        _para("Collect samples", numbered=True),
        _table([["Site", "Count"], ["North", "12"], ["South"]]),
        IMAGE_PARAGRAPH,
        _para("Results", style="Heading2"),
        _para("Counts were higher than expected."),
    ])
    path = tmp_path / "notes.docx"
    path.write_bytes(build_docx(body, media={"word/media/image1.png": png_bytes(40, 30)}))
    return path


@pytest.fixture
def pdf_file(tmp_path) -> Path:
    doc = pymupdf.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 80), "Quarterly Report", fontsize=22)
    page.insert_text((72, 130), "The team reviewed the figures for the quarter and the", fontsize=11)
    page.insert_text((72, 144), "results are in line with the plan that was set in spring.", fontsize=11)
    page.insert_image(pymupdf.Rect(72, 300, 172, 500), stream=png_bytes(100, 200, "red"))
    doc.set_metadata({
        "title": "Quarterly Report",
        "author": "Finance Team",
        "creationDate": "D:20240115093000+02'00'",
    })
    path = tmp_path / "report.pdf"
    doc.save(str(path))
    doc.close()
    return path
