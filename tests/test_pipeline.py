import asyncio

import pytest

from config.settings import ProcessingSettings
from tracedeck import DocumentResult, process, process_document, process_document_async
from tracedeck.errors import (
    DocumentIOError,
    DocxError,
    FormatMismatchError,
    ImageError,
    ParseError,
    UnsupportedFormatError,
)
from tracedeck.models import BlockType


def test_process_png(png_file):
    result = process_document(png_file)
    extracted = result.extracted
    assert extracted.text == ""
    assert extracted.metadata.pages == 1
    assert extracted.metadata.file_size == png_file.stat().st_size
    assert [(i.width, i.height) for i in extracted.images] == [(100, 200)]

    processed = result.processed
    assert [b.block_type for b in processed.text_blocks] == [BlockType.CONTENT]
    assert [(v.position, v.size) for v in processed.visual_elements] == [((0, 0), (100, 200))]
    assert processed.structure.total_pages == 1
    assert result.processing_time_ms >= 0


def test_process_docx(docx_file):
    result = process_document(str(docx_file))
    sections = result.processed.structure.sections
    assert [(s.title, s.content_blocks) for s in sections] == [("Introduction", 2), ("Results", 1)]
    assert result.processed.structure.total_pages == 1
    assert result.processed.structure.language == "en"
    assert len(result.processed.visual_elements) == 1
    assert all(0.0 <= b.confidence <= 1.0 for b in result.processed.text_blocks)


def test_process_pdf(pdf_file):
    result = process_document(pdf_file)
    blocks = result.processed.text_blocks
    assert blocks[0].content == "Quarterly Report"
    assert blocks[0].block_type is BlockType.HEADING
    assert result.processed.structure.sections[0].title == "Quarterly Report"
    visual = result.processed.visual_elements[0]
    assert (visual.position, visual.size, visual.page) == ((72, 300), (100, 200), 1)


def test_result_round_trips_through_json(docx_file):
    result = process_document(docx_file)
    assert DocumentResult.from_json(result.to_json()) == result


def test_alias_and_async(png_file):
    assert process is process_document
    result = asyncio.run(process_document_async(png_file))
    assert result.extracted.images[0].width == 100


def test_missing_file_is_io_error(tmp_path):
    with pytest.raises(DocumentIOError) as excinfo:
        process_document(tmp_path / "nope.pdf")
    assert str(excinfo.value).startswith("IO error: ")


def test_directory_is_io_error(tmp_path):
    folder = tmp_path / "folder.pdf"
    folder.mkdir()
    with pytest.raises(DocumentIOError):
        process_document(folder)


def test_size_limit(tmp_path, png_file):
    big = tmp_path / "big.png"
    big.write_bytes(png_file.read_bytes() + b"\0" * (1024 * 1024))
    with pytest.raises(DocumentIOError) as excinfo:
        process_document(big, ProcessingSettings(max_file_size_mb=1))
    assert "1 MB limit" in str(excinfo.value)


def test_unsupported_and_missing_extension(tmp_path):
    odd = tmp_path / "data.xyz"
    odd.write_text("x")
    with pytest.raises(UnsupportedFormatError):
        process_document(odd)

    bare = tmp_path / "Makefile"
    bare.write_text("all:")
    with pytest.raises(ParseError):
        process_document(bare)


def test_signature_check_can_be_disabled(tmp_path, png_file):
    disguised = tmp_path / "scan.docx"
    disguised.write_bytes(png_file.read_bytes())
    with pytest.raises(FormatMismatchError):
        process_document(disguised)
    # without the check the DOCX decoder gets the file and rejects it itself
    with pytest.raises(DocxError):
        process_document(disguised, ProcessingSettings(verify_signature=False))


def test_corrupt_image_fails_without_partial_result(tmp_path):
    path = tmp_path / "bad.png"
    path.write_text("not pixels at all")
    with pytest.raises(ImageError):
        process_document(path)
